import os
import logging
from datetime import datetime
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from google.auth.transport.requests import Request
from googleapiclient.discovery import build
from dotenv import load_dotenv

from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional

from calendar_agent.TimeZoneLib import location_to_zone, parse_local_datetime, to_rfc3339


logger = logging.getLogger(__name__)

SCOPES = ['https://www.googleapis.com/auth/calendar']
EVENT_TITLE_PREFIX = "[Auto] "


class ConfigurationError(RuntimeError):
    pass


class ImportConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    calendar_id: str = Field(description="Calendar the flight events are inserted into.")
    credentials_file: str = Field("credentials.json", description="OAuth client secrets file.")
    token_file: str = Field("token.json", description="Authorized user token file.")


def load_config(env_file: Optional[str] = ".env") -> ImportConfig:
    # .env が無くても環境変数だけで動く
    if env_file:
        load_dotenv(env_file)

    calendar_id = os.getenv("CAL_ID", "").strip()
    if not calendar_id:
        raise ConfigurationError("CAL_ID is not set")

    return ImportConfig(
        calendar_id=calendar_id,
        credentials_file=os.getenv("GOOGLE_CREDENTIALS_FILE", "credentials.json"),
        token_file=os.getenv("GOOGLE_TOKEN_FILE", "token.json"),
    )


class ResolvedEvent(BaseModel):
    title: str = Field(description="Event summary, '[Auto] ' followed by the flight number.")
    description: str = Field(description="Route, '<departure> > <arrival>'.")
    start: datetime = Field(description="Departure instant, timezone aware.")
    end: datetime = Field(description="Arrival instant, timezone aware.")

    def to_event_data(self) -> Dict[str, object]:
        return {
            'summary': self.title,
            'description': self.description,
            'start': {'dateTime': to_rfc3339(self.start)},
            'end': {'dateTime': to_rfc3339(self.end)},
        }


def resolve_flight(record) -> ResolvedEvent:
    start = parse_local_datetime(record.start_datetime, location_to_zone(record.start_location))
    end = parse_local_datetime(record.end_datetime, location_to_zone(record.end_location))
    return ResolvedEvent(
        title=EVENT_TITLE_PREFIX + record.flight_number,
        description=f"{record.start_location} > {record.end_location}",
        start=start,
        end=end,
    )


class GoogleCalendar:
    def __init__(self, credentials_file='credentials.json', token_file='token.json', scopes=SCOPES, service=None):
        self.scopes = scopes
        self.credentials_file = credentials_file
        self.token_file = token_file
        if service is None:
            self.credentials = self._get_credentials()
            service = build('calendar', 'v3', credentials=self.credentials)
        self.service = service

    @classmethod
    def from_config(cls, config: ImportConfig):
        return cls(credentials_file=config.credentials_file, token_file=config.token_file)

    def _get_credentials(self):
        # 保存済みトークンを優先し、期限切れならリフレッシュする
        creds = None
        if os.path.exists(self.token_file):
            try:
                creds = Credentials.from_authorized_user_file(self.token_file, self.scopes)
            except ValueError as e:
                raise ConfigurationError(f"Unable to read token file {self.token_file}: {e}") from e

        if creds and creds.valid:
            return creds

        if creds and creds.expired and creds.refresh_token:
            creds.refresh(Request())
        else:
            if not os.path.exists(self.credentials_file):
                raise ConfigurationError(
                    f"No usable token in {self.token_file} and no client secrets file {self.credentials_file}"
                )
            flow = InstalledAppFlow.from_client_secrets_file(self.credentials_file, self.scopes)
            creds = flow.run_local_server(port=0)

        with open(self.token_file, 'w') as f:
            f.write(creds.to_json())
        return creds

    def create_event(self, event_data, calendar_id='primary'):
        # 新しいイベントを作成
        created_event = self.service.events().insert(calendarId=calendar_id, body=event_data).execute()
        return created_event


class FlightEventSubmitter:
    def __init__(self, calendar, calendar_id, log=None):
        self.calendar = calendar
        self.calendar_id = calendar_id
        self.log = log or logger

    def submit_one(self, record):
        event = resolve_flight(record)
        created_event = self.calendar.create_event(event.to_event_data(), calendar_id=self.calendar_id)
        link = created_event.get('htmlLink') or created_event.get('id')
        self.log.info("Event created: %s", link)
        return link

    def submit(self, records) -> List[str]:
        """
        Create one calendar event per flight, in input order.

        The first failure (unknown airport, bad date, API error) propagates and stops the
        batch. Events created before it are left in the calendar.
        """
        links = []
        for record in records:
            links.append(self.submit_one(record))
        return links
