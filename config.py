"""
Configuration and data loading/saving for TripSplit
"""
from __future__ import annotations
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Optional

from models import DEFAULT_BASE_CURRENCY, Expense, Ledger, Participant
from settlement import SettlementPolicy
from utils import app_dir, normalize_currency

log = logging.getLogger(__name__)

LEDGER_FILE = "ledger.json"
SETTINGS_FILE = "settings.json"
RATES_FILE = "rates.json"


@dataclass
class Settings:
    """User preferences"""
    base_currency: str = DEFAULT_BASE_CURRENCY
    settlement_policy: SettlementPolicy = SettlementPolicy.SIMPLIFIED
    data_dir: str = field(default_factory=app_dir)

    @property
    def ledger_path(self) -> str:
        return os.path.join(self.data_dir, LEDGER_FILE)

    @property
    def rates_path(self) -> str:
        return os.path.join(self.data_dir, RATES_FILE)


def load_settings(path: Optional[str] = None) -> Settings:
    """Load settings from JSON file, falling back to defaults"""
    base = app_dir()
    path = path or os.path.join(base, SETTINGS_FILE)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return Settings(data_dir=base)
    except ValueError as ex:
        log.error("Failed to parse settings from %s: %s", path, ex)
        return Settings(data_dir=base)

    try:
        policy = SettlementPolicy(data.get("settlement_policy", SettlementPolicy.SIMPLIFIED.value))
    except ValueError:
        log.warning("Unknown settlement policy %r, using simplified", data.get("settlement_policy"))
        policy = SettlementPolicy.SIMPLIFIED
    return Settings(
        base_currency=normalize_currency(data.get("base_currency", DEFAULT_BASE_CURRENCY)),
        settlement_policy=policy,
        data_dir=data.get("data_dir", base),
    )


def save_settings(settings: Settings, path: Optional[str] = None) -> None:
    """Save settings to JSON file"""
    path = path or os.path.join(app_dir(), SETTINGS_FILE)
    with open(path, "w", encoding="utf-8") as f:
        json.dump({
            "base_currency": settings.base_currency,
            "settlement_policy": settings.settlement_policy.value,
            "data_dir": settings.data_dir,
        }, f, ensure_ascii=False, indent=2)


def get_default_ledger(settings: Optional[Settings] = None) -> Ledger:
    """Create an empty ledger in the configured base currency"""
    base = settings.base_currency if settings else DEFAULT_BASE_CURRENCY
    return Ledger(base_currency=base)


def ledger_to_dict(ledger: Ledger) -> dict:
    """Convert Ledger object to dictionary for JSON serialization"""
    return {
        "version": ledger.version,
        "baseCurrency": ledger.base_currency,
        "participants": [{"id": p.id, "name": p.name} for p in ledger.participants],
        "expenses": [
            {
                "id": e.id,
                "description": e.description,
                "amount": e.amount,
                "currency": e.currency,
                "paidById": e.paid_by_id,
                "sharedByIds": list(e.shared_by_ids),
            } for e in ledger.expenses
        ],
    }


def dict_to_ledger(d: dict) -> Ledger:
    """
    Convert dictionary from JSON to Ledger object.
    References are kept as stored, even if they point at nobody.
    """
    participants = [Participant(id=int(p["id"]), name=str(p["name"])) for p in d.get("participants", [])]
    exps = [
        Expense(
            id=int(e["id"]),
            description=str(e.get("description", "")),
            amount=float(e["amount"]),
            currency=normalize_currency(e.get("currency", DEFAULT_BASE_CURRENCY)),
            paid_by_id=int(e["paidById"]),
            shared_by_ids=[int(x) for x in e.get("sharedByIds", [])],
        ) for e in d.get("expenses", [])
    ]
    ids = [p.id for p in participants] + [e.id for e in exps]

    return Ledger(
        version=d.get("version", 1),
        participants=participants,
        expenses=exps,
        base_currency=normalize_currency(d.get("baseCurrency", DEFAULT_BASE_CURRENCY)),
        last_id=max(ids, default=0),
    )


def load_ledger(path: str, settings: Optional[Settings] = None) -> Ledger:
    """Load ledger from JSON file; missing or unreadable files give an empty ledger"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            d = json.load(f)
        return dict_to_ledger(d)
    except FileNotFoundError:
        return get_default_ledger(settings)
    except (ValueError, KeyError, TypeError, AttributeError) as ex:
        log.error("Failed to parse ledger from %s: %s", path, ex)
        return get_default_ledger(settings)


def save_ledger(path: str, ledger: Ledger) -> None:
    """Save ledger to JSON file"""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(ledger_to_dict(ledger), f, ensure_ascii=False, indent=2)
