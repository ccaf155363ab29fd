"""Modelos decodificados das respostas dos endpoints de gerenciamento.

Os eventos de supressão trazem ``created`` em segundos desde a época; as estatísticas
trazem ``date`` no formato ``YYYY-MM-DD``.
"""
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


def _epoch(valor: Any) -> datetime:
    return datetime.fromtimestamp(int(valor), tz=timezone.utc)


@dataclass(frozen=True)
class Block:
    email: str
    created: datetime
    reason: str
    status: str

    @classmethod
    def from_dict(cls, dados: Dict[str, Any]) -> 'Block':
        return cls(email=dados['email'],
                   created=_epoch(dados['created']),
                   reason=dados['reason'],
                   status=dados['status'])


@dataclass(frozen=True)
class Bounce:
    email: str
    created: datetime
    reason: str
    status: str

    @classmethod
    def from_dict(cls, dados: Dict[str, Any]) -> 'Bounce':
        return cls(email=dados['email'],
                   created=_epoch(dados['created']),
                   reason=dados['reason'],
                   status=dados['status'])


@dataclass(frozen=True)
class InvalidEmail:
    email: str
    created: datetime
    reason: str

    @classmethod
    def from_dict(cls, dados: Dict[str, Any]) -> 'InvalidEmail':
        return cls(email=dados['email'],
                   created=_epoch(dados['created']),
                   reason=dados['reason'])


@dataclass(frozen=True)
class SpamReport:
    email: str
    created: datetime
    ip: str

    @classmethod
    def from_dict(cls, dados: Dict[str, Any]) -> 'SpamReport':
        return cls(email=dados['email'],
                   created=_epoch(dados['created']),
                   ip=dados['ip'])


@dataclass(frozen=True)
class GlobalUnsubscribe:
    email: str
    created: datetime

    @classmethod
    def from_dict(cls, dados: Dict[str, Any]) -> 'GlobalUnsubscribe':
        return cls(email=dados['email'], created=_epoch(dados['created']))


@dataclass(frozen=True)
class Subuser:
    id: int
    username: str
    email: str
    disabled: bool

    @classmethod
    def from_dict(cls, dados: Dict[str, Any]) -> 'Subuser':
        return cls(id=int(dados['id']),
                   username=dados['username'],
                   email=dados['email'],
                   disabled=bool(dados['disabled']))


class StatisticAggregation(Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class StatisticDimension(Enum):
    CATEGORY = "category"
    SUBUSER = "subuser"


@dataclass(frozen=True)
class StatisticMetric:
    blocks: int
    bounce_drops: int
    bounces: int
    clicks: int
    deferred: int
    delivered: int
    invalid_emails: int
    opens: int
    processed: int
    requests: int
    spam_report_drops: int
    spam_reports: int
    unique_clicks: int
    unique_opens: int
    unsubscribe_drops: int
    unsubscribes: int

    @classmethod
    def from_dict(cls, dados: Dict[str, Any]) -> 'StatisticMetric':
        return cls(**{nome: int(dados[nome]) for nome in cls.__dataclass_fields__})


@dataclass(frozen=True)
class StatisticSample:
    metrics: StatisticMetric
    name: Optional[str] = None
    type: Optional[StatisticDimension] = None

    @classmethod
    def from_dict(cls, dados: Dict[str, Any]) -> 'StatisticSample':
        tipo = dados.get('type')
        return cls(metrics=StatisticMetric.from_dict(dados['metrics']),
                   name=dados.get('name'),
                   type=StatisticDimension(tipo) if tipo is not None else None)


@dataclass(frozen=True)
class Statistic:
    date: date
    stats: List[StatisticSample]

    @classmethod
    def from_dict(cls, dados: Dict[str, Any]) -> 'Statistic':
        return cls(date=datetime.strptime(dados['date'], '%Y-%m-%d').date(),
                   stats=[StatisticSample.from_dict(s) for s in dados['stats']])


def list_of(model):
    """Cria um decodificador para uma lista JSON de ``model``."""

    def decoder(payload: List[Dict[str, Any]]) -> list:
        return [model.from_dict(item) for item in payload]

    return decoder
