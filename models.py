"""
Data models for call statistics and VPBX users
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class CallRecord:
    """
    One row of a statistics export

    Attributes:
        records: Recording identifiers attached to the call
        start: Call start (unix seconds)
        finish: Call end (unix seconds)
        answer: Answer time (unix seconds), 0 if the call was never answered
        from_extension: Caller extension
        from_number: Caller number
        to_extension: Callee extension
        to_number: Callee number
        disconnect_reason: Provider disconnect code
        line_number: Line the call went through
        location: Where the call was routed (e.g. "ivr", "abonent")
        entry_id: Call entry identifier
    """
    records: List[str]
    start: int
    finish: int
    answer: int
    from_extension: str
    from_number: str
    to_extension: str
    to_number: str
    disconnect_reason: int
    line_number: str
    location: str
    entry_id: str

    @property
    def answered(self) -> bool:
        return self.answer > 0

    @property
    def duration(self) -> int:
        return max(self.finish - self.start, 0)

    @property
    def talk_time(self) -> int:
        if not self.answered:
            return 0
        return max(self.finish - self.answer, 0)


@dataclass
class UserNumber:
    """Phone number attached to a user, in ring order"""
    number: str
    protocol: str
    order: int
    wait_sec: int
    status: str

    @classmethod
    def from_dict(cls, data: dict) -> 'UserNumber':
        return cls(
            number=data.get("number", ""),
            protocol=data.get("protocol", ""),
            order=int(data.get("order") or 0),
            wait_sec=int(data.get("wait_sec") or 0),
            status=data.get("status", ""),
        )


@dataclass
class User:
    """
    VPBX user (a manager or agent, not a caller)

    Attributes:
        name: Display name
        email: E-mail address
        department: Department name
        position: Job title
        extension: Primary extension
        outgoing_line: Number used for outgoing calls
        numbers: Associated phone numbers
    """
    name: str
    email: str
    department: str
    position: str
    extension: str
    outgoing_line: str
    numbers: List[UserNumber] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> 'User':
        """
        Build a user from the provider's JSON object

        Args:
            data: One element of the ``users`` list

        Returns:
            User: The parsed user
        """
        general = data.get("general") or {}
        telephony = data.get("telephony") or {}
        return cls(
            name=general.get("name", ""),
            email=general.get("email", ""),
            department=general.get("department", ""),
            position=general.get("position", ""),
            extension=telephony.get("extension", ""),
            outgoing_line=telephony.get("outgoingline", ""),
            numbers=[UserNumber.from_dict(n) for n in telephony.get("numbers") or []],
        )
