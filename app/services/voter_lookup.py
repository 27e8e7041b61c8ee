# app/services/voter_lookup.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings
from app.core.errors import UpstreamError

logger = logging.getLogger(__name__)


def _full_name(voter: Dict[str, Any]) -> str:
    parts = [voter.get(k) for k in ("first_name", "middle_name", "surname")]
    return " ".join(p for p in parts if p).strip()


def parse_lookup_response(data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Maps the registry payload to participant fields (snake_case). None when there is no match."""
    message = (data or {}).get("message") or {}
    voter = message.get("registered_voters")
    adult = message.get("adult_population")
    if voter:
        return {
            "id_number": voter.get("id_or_passport_number"),
            "name": _full_name(voter),
            "date_of_birth": voter.get("date_of_birth"),
            "sex": voter.get("sex"),
            "county": voter.get("county"),
            "constituency": voter.get("constituency"),
            "ward": voter.get("ward"),
            "polling_center": voter.get("polling_center"),
            "is_registered_voter": True,
            "is_invited": False,
        }
    if adult:
        # fora do registro eleitoral: sem localização
        return {
            "id_number": adult.get("id_number"),
            "name": adult.get("full_name"),
            "date_of_birth": adult.get("date_of_birth"),
            "sex": adult.get("sex"),
            "county": "",
            "constituency": "",
            "ward": "",
            "polling_center": "",
            "is_registered_voter": False,
            "is_invited": False,
        }
    return None


class VoterLookupClient:
    def __init__(
        self,
        url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.url = url if url is not None else settings.VOTER_LOOKUP_API_URL
        self.token = token if token is not None else settings.VOTER_LOOKUP_API_TOKEN
        self.timeout = timeout if timeout is not None else settings.VOTER_LOOKUP_TIMEOUT_SECONDS
        self.transport = transport

    def lookup(
        self,
        id_number: str,
        *,
        county: Optional[str] = None,
        constituency: Optional[str] = None,
        ward: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        if not self.url:
            raise UpstreamError("Voter lookup service is not configured")

        filters = {k: v for k, v in (("county", county), ("constituency", constituency), ("ward", ward)) if v}
        body: Dict[str, Any] = {"id_number": id_number}
        if filters:
            body["filters"] = filters

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(
                    self.url,
                    json=body,
                    headers={"Authorization": f"token {self.token or ''}"},
                )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("voter lookup failed id_number=%s filters=%s: %s", id_number, filters, e)
            raise UpstreamError("Voter lookup service unavailable") from e

        return parse_lookup_response(data)


def get_voter_lookup() -> VoterLookupClient:
    return VoterLookupClient()
