"""
Member directory service.

Projects member table rows into the list and detail payloads. Every call
reads the member table afresh.
"""

import logging
from typing import Dict, List, Optional

from ..auth import MemberNotFoundError
from ..store import cell_text, is_disabled_member
from ..store.credential_store import (
    COL_PHONE, COL_PASSWORD, COL_NAME, COL_BIRTHDAY, COL_UNIT, COL_HOME_PHONE,
    COL_ADDRESS, COL_EMAIL, COL_LINE, COL_HISTORY, COL_DECEASED, COL_PHOTO,
)
from .base import BaseService

logger = logging.getLogger(__name__)

# Directory listing, in display order
LIST_FIELDS = [COL_NAME, COL_UNIT, COL_PHONE, COL_ADDRESS, COL_EMAIL, COL_LINE, COL_DECEASED]

# Profile page; the password column is deliberately absent
DETAIL_FIELDS = [
    COL_NAME, COL_BIRTHDAY, COL_UNIT, COL_PHONE, COL_HOME_PHONE,
    COL_ADDRESS, COL_EMAIL, COL_LINE, COL_HISTORY, COL_DECEASED,
]

# Photo link is published under this key
PHOTO_URL_FIELD = "照片URL"


class MemberService(BaseService):
    """
    Service for reading member records.

    Responsibilities:
    - List all enabled members with contact fields
    - Look up one member's profile by phone
    """

    def list_members(self) -> List[Dict[str, str]]:
        """
        List enabled members.

        Disabled rows (no phone, or placeholder password) are skipped.

        Returns:
            One dict per member keyed by LIST_FIELDS

        Raises:
            StoreUnavailableError: table or phone/password column missing
        """
        members = self.store.read_members(required=(COL_PHONE, COL_PASSWORD))
        schema = members.schema

        result = [
            schema.project(row, LIST_FIELDS)
            for row in members
            if not is_disabled_member(schema, row)
        ]
        logger.debug(f"Listed {len(result)} of {len(members)} member rows")
        return result

    def get_member_detail(self, phone: Optional[str]) -> Dict[str, str]:
        """
        Get one member's profile.

        Args:
            phone: Mobile phone number of the member

        Returns:
            Dict keyed by DETAIL_FIELDS plus the photo URL

        Raises:
            StoreUnavailableError: table or phone column missing
            MemberNotFoundError: no row with that phone
        """
        phone = cell_text(phone)
        members = self.store.read_members(required=(COL_PHONE,))
        schema = members.schema

        if phone:
            for row in members:
                if schema.get(row, COL_PHONE) == phone:
                    detail = schema.project(row, DETAIL_FIELDS)
                    detail[PHOTO_URL_FIELD] = schema.get(row, COL_PHOTO)
                    return detail

        logger.info(f"Member not found for phone {phone or '<empty>'}")
        raise MemberNotFoundError()
