from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field
from dateutil.parser import isoparse
from datetime import date, datetime


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    return isoparse(value) if value else None


def _parse_date(value: Optional[str]) -> Optional[date]:
    return isoparse(value).date() if value else None


@dataclass(frozen=True)
class BasicError:
    """
    Error envelope returned by the API for unsuccessful requests.

    Attributes
    ----------
    summary : str
        Short description of the error.
    detail : str
        Human-readable explanation (e.g. "Not found.").
    status_code : int, optional
        Status code echoed in the body, when present.
    type : str, optional
        Machine-readable error type, when present.
    """

    summary: Optional[str]
    detail: Optional[str]
    status_code: Optional[int] = None
    type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BasicError":
        if not isinstance(data, dict):
            raise TypeError(f"Expected an error object, got {type(data).__name__}")

        # Field-level validation errors come back as {"field": {...}}.
        summary = data.get("summary")
        detail = data.get("detail")
        if summary is None and detail is None:
            for value in data.values():
                if isinstance(value, dict) and "detail" in value:
                    summary = value.get("summary")
                    detail = value.get("detail")
                    break

        status_code = data.get("status_code")
        return cls(
            summary=summary,
            detail=detail,
            status_code=int(status_code) if status_code is not None else None,
            type=data.get("type"),
        )

    def __str__(self) -> str:
        return f"{self.summary}: {self.detail}"


@dataclass(frozen=True)
class BasicResponse:
    """Confirmation returned by delete calls, e.g. "Requisition deleted"."""

    summary: Optional[str]
    detail: Optional[str]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BasicResponse":
        return cls(summary=data.get("summary"), detail=data.get("detail"))


@dataclass(frozen=True)
class Institution:
    """A bank (ASPSP) supported by the API."""

    id: str
    name: str
    bic: Optional[str]
    transaction_total_days: Optional[int]
    countries: List[str]
    logo: Optional[str]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Institution":
        days = data.get("transaction_total_days")
        return cls(
            id=data["id"],
            name=data["name"],
            bic=data.get("bic"),
            transaction_total_days=int(days) if days not in (None, "") else None,
            countries=list(data.get("countries", [])),
            logo=data.get("logo"),
        )


@dataclass(frozen=True)
class CreateAgreementRequest:
    """Body of a `POST agreements/enduser/` call."""

    institution_id: str
    max_historical_days: int = 90
    access_valid_for_days: int = 90
    access_scope: List[str] = field(
        default_factory=lambda: ["balances", "details", "transactions"]
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "institution_id": self.institution_id,
            "max_historical_days": self.max_historical_days,
            "access_valid_for_days": self.access_valid_for_days,
            "access_scope": list(self.access_scope),
        }


@dataclass(frozen=True)
class Agreement:
    """An end-user agreement granting access to an institution's data."""

    id: str
    created: Optional[datetime]
    institution_id: str
    max_historical_days: int
    access_valid_for_days: int
    access_scope: List[str]
    accepted: Optional[datetime]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Agreement":
        return cls(
            id=data["id"],
            created=_parse_datetime(data.get("created")),
            institution_id=data["institution_id"],
            max_historical_days=int(data["max_historical_days"]),
            access_valid_for_days=int(data["access_valid_for_days"]),
            access_scope=list(data.get("access_scope", [])),
            accepted=_parse_datetime(data.get("accepted")),
        )


@dataclass(frozen=True)
class CreateRequisitionRequest:
    """Body of a `POST requisitions/` call."""

    redirect: str
    institution_id: str
    reference: Optional[str] = None
    agreement: Optional[str] = None
    user_language: Optional[str] = None
    account_selection: bool = False
    redirect_immediate: bool = False

    def to_dict(self) -> Dict[str, Any]:
        body = {
            "redirect": self.redirect,
            "institution_id": self.institution_id,
            "reference": self.reference,
            "agreement": self.agreement,
            "user_language": self.user_language,
            "account_selection": self.account_selection,
            "redirect_immediate": self.redirect_immediate,
        }
        return {k: v for k, v in body.items() if v is not None}


@dataclass(frozen=True)
class Requisition:
    """A link between an end user and their bank, holding linked accounts."""

    id: str
    created: Optional[datetime]
    redirect: Optional[str]
    status: Optional[str]
    institution_id: str
    agreement: Optional[str]
    reference: Optional[str]
    accounts: List[str]
    user_language: Optional[str]
    link: Optional[str]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Requisition":
        return cls(
            id=data["id"],
            created=_parse_datetime(data.get("created")),
            redirect=data.get("redirect"),
            status=data.get("status"),
            institution_id=data["institution_id"],
            agreement=data.get("agreement"),
            reference=data.get("reference"),
            accounts=list(data.get("accounts", [])),
            user_language=data.get("user_language"),
            link=data.get("link"),
        )


@dataclass(frozen=True)
class Account:
    """Metadata of a bank account linked through a requisition."""

    id: str
    created: Optional[datetime]
    last_accessed: Optional[datetime]
    iban: Optional[str]
    institution_id: Optional[str]
    status: Optional[str]
    owner_name: Optional[str]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Account":
        return cls(
            id=data["id"],
            created=_parse_datetime(data.get("created")),
            last_accessed=_parse_datetime(data.get("last_accessed")),
            iban=data.get("iban"),
            institution_id=data.get("institution_id"),
            status=data.get("status"),
            owner_name=data.get("owner_name"),
        )


@dataclass(frozen=True)
class AmountCurrencyPair:
    amount: str
    currency: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AmountCurrencyPair":
        return cls(amount=str(data["amount"]), currency=data["currency"])


@dataclass(frozen=True)
class Balance:
    balance_amount: AmountCurrencyPair
    balance_type: str
    reference_date: Optional[date]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Balance":
        return cls(
            balance_amount=AmountCurrencyPair.from_dict(data["balanceAmount"]),
            balance_type=data["balanceType"],
            reference_date=_parse_date(data.get("referenceDate")),
        )

    @classmethod
    def list_from_response(cls, data: Dict[str, Any]) -> List["Balance"]:
        return [cls.from_dict(b) for b in data["balances"]]


@dataclass(frozen=True)
class AccountDetails:
    """
    Details of an account as reported by the bank.

    Only the most common fields are mapped; everything the bank returns is
    kept in `raw`.
    """

    resource_id: Optional[str]
    iban: Optional[str]
    currency: Optional[str]
    owner_name: Optional[str]
    name: Optional[str]
    product: Optional[str]
    cash_account_type: Optional[str]
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "AccountDetails":
        account = data["account"]
        return cls(
            resource_id=account.get("resourceId"),
            iban=account.get("iban"),
            currency=account.get("currency"),
            owner_name=account.get("ownerName"),
            name=account.get("name"),
            product=account.get("product"),
            cash_account_type=account.get("cashAccountType"),
            raw=dict(account),
        )


@dataclass(frozen=True)
class Transaction:
    transaction_id: Optional[str]
    booking_date: Optional[date]
    value_date: Optional[date]
    transaction_amount: AmountCurrencyPair
    remittance_information_unstructured: Optional[str]
    creditor_name: Optional[str]
    debtor_name: Optional[str]
    internal_transaction_id: Optional[str]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        return cls(
            transaction_id=data.get("transactionId"),
            booking_date=_parse_date(data.get("bookingDate")),
            value_date=_parse_date(data.get("valueDate")),
            transaction_amount=AmountCurrencyPair.from_dict(
                data["transactionAmount"]
            ),
            remittance_information_unstructured=data.get(
                "remittanceInformationUnstructured"
            ),
            creditor_name=data.get("creditorName"),
            debtor_name=data.get("debtorName"),
            internal_transaction_id=data.get("internalTransactionId"),
        )


@dataclass(frozen=True)
class AccountTransactions:
    """Booked and pending transactions of one account."""

    booked: List[Transaction]
    pending: List[Transaction]

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "AccountTransactions":
        transactions = data["transactions"]
        return cls(
            booked=[Transaction.from_dict(t) for t in transactions.get("booked", [])],
            pending=[Transaction.from_dict(t) for t in transactions.get("pending", [])],
        )


def list_of(item_parser):
    """Parser for a JSON array whose items are built by `item_parser`."""
    def parse(data: List[Any]) -> list:
        if not isinstance(data, list):
            raise TypeError(f"Expected a list, got {type(data).__name__}")
        return [item_parser(item) for item in data]
    return parse
