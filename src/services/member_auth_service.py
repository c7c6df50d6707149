"""
Member authentication service.

Checks phone + birthday credentials against the member table, requires
paid dues for the current or previous year, and issues bearer tokens.
Also provides the authorization gate used by protected actions.
"""

import logging
from typing import Any, List, Optional
from dataclasses import dataclass

from ..auth import AuthError, NoSuchMemberError, NoPaymentRecordError, DuesUnpaidError
from ..auth.token_codec import FIELD_SEPARATOR
from ..store import cell_text, parse_year, is_disabled_member
from ..store.credential_store import COL_PHONE, COL_PASSWORD, COL_NAME
from .base import BaseService

logger = logging.getLogger(__name__)

LOGIN_SUCCESS_MSG = "登入成功"


@dataclass
class Identity:
    """A verified member, known by display name."""
    name: str


@dataclass
class LoginResult:
    """Login outcome."""
    success: bool
    identity: Optional[Identity] = None
    token: Optional[str] = None
    msg: Optional[str] = None
    code: Optional[str] = None

    def to_dict(self) -> dict:
        result = {"success": self.success, "msg": self.msg}
        if self.token:
            result["token"] = self.token
        return result


class MemberAuthService(BaseService):
    """
    Service for member login and token authorization.

    Handles:
    - Credential check (phone as account, birthday as password)
    - Dues check (current or previous calendar year)
    - Token issuance on success
    - Token validation for protected actions
    """

    def login(self, phone: Optional[str], birthday: Optional[str]) -> LoginResult:
        """
        Login with phone and birthday.

        Args:
            phone: Mobile phone number (account)
            birthday: Birthday string (password)

        Returns:
            LoginResult with a token if successful, otherwise the failure reason
        """
        try:
            identity = self.verify_member(phone, birthday)
            token = self.tokens.mint(identity.name)
        except AuthError as e:
            logger.info(f"Login rejected for {cell_text(phone) or '<empty>'}: {e.code}")
            return LoginResult(success=False, msg=e.message, code=e.code)

        logger.info(f"Member logged in: {identity.name}")
        return LoginResult(success=True, identity=identity, token=token, msg=LOGIN_SUCCESS_MSG)

    def verify_member(self, phone: Optional[str], birthday: Optional[str]) -> Identity:
        """
        Resolve the identity for a credential pair and check dues.

        Raises:
            StoreUnavailableError: member/payment table or a column is missing
            NoSuchMemberError: no enabled row matches phone and birthday
            NoPaymentRecordError: the member has no payment row
            DuesUnpaidError: no payment marker for this or last year
        """
        phone = cell_text(phone)
        birthday = cell_text(birthday)

        # Both tables must exist before credentials are looked at
        payments = self.store.read_payments()
        members = self.store.read_members(required=(COL_PHONE, COL_PASSWORD, COL_NAME))
        if members.is_empty():
            raise NoSuchMemberError()
        schema = members.schema

        member_row = None
        for row in members:
            if is_disabled_member(schema, row):
                continue
            if schema.get(row, COL_PHONE) == phone and schema.get(row, COL_PASSWORD) == birthday:
                member_row = row
                break

        if member_row is None:
            raise NoSuchMemberError()

        name = schema.get(member_row, COL_NAME)
        if not name:
            # A nameless row cannot carry a token identity
            raise NoSuchMemberError()
        if FIELD_SEPARATOR in name:
            logger.warning(f"Member name {name!r} contains {FIELD_SEPARATOR!r} and cannot be put in a token")
            raise NoSuchMemberError()

        self.check_dues(name, payments)
        return Identity(name=name)

    def check_dues(self, name: str, rows: List[List[Any]]):
        """
        Require a payment marker for the current or previous year.

        Args:
            name: Display name of the member
            rows: Payment table, header first

        Raises:
            NoPaymentRecordError: no payment row for the name
            DuesUnpaidError: neither year is marked
        """
        if not rows:
            raise NoPaymentRecordError()

        header = rows[0]
        pay_row = self._find_payment_row(rows[1:], name)
        if pay_row is None:
            raise NoPaymentRecordError()

        year_now = self.context.current_year()
        eligible_years = {year_now, year_now - 1}

        for idx in range(1, min(len(header), len(pay_row))):
            if parse_year(header[idx]) in eligible_years and cell_text(pay_row[idx]):
                return

        logger.info(f"Dues unpaid for {name} in {year_now - 1}/{year_now}")
        raise DuesUnpaidError()

    @staticmethod
    def _find_payment_row(rows: List[List[Any]], name: str) -> Optional[List[Any]]:
        for row in rows:
            if row and cell_text(row[0]) == name:
                return row
        return None

    def authorize(self, token: Optional[str]) -> Identity:
        """
        Validate a bearer token.

        Decode errors propagate unchanged (MissingTokenError,
        MalformedTokenError, ExpiredTokenError).
        """
        payload = self.tokens.decode(token)
        return Identity(name=payload.identity)
