"""Estatísticas de envio: globais, por categoria e por subusuário."""
from datetime import date
from typing import List, Optional

from .. import constants
from ..errors import ValidationError, ValidationErrorCode
from ..events import Statistic, StatisticAggregation, list_of
from ..request import HTTPMethod, RequestDescriptor
from ..types import ContentType

GLOBAL_STATS_PATH = "/v3/stats"
CATEGORY_STATS_PATH = "/v3/categories/stats"
SUBUSER_STATS_PATH = "/v3/subusers/stats"

DATE_FORMAT = '%Y-%m-%d'


def validate_period(start: date, end: Optional[date]) -> None:
    if end is not None and not start < end:
        raise ValidationError(ValidationErrorCode.INVALID_END_DATE)


def _period_query(start: date,
                  end: Optional[date],
                  aggregated_by: Optional[StatisticAggregation]) -> list:
    query = [('start_date', start.strftime(DATE_FORMAT))]
    if end is not None:
        query.append(('end_date', end.strftime(DATE_FORMAT)))
    if aggregated_by is not None:
        query.append(('aggregated_by', aggregated_by.value))
    return query


def _stats_request(path: str, query: list, validator) -> RequestDescriptor:
    return RequestDescriptor(method=HTTPMethod.GET,
                             path=path,
                             query=query,
                             content_type=ContentType.FORM_URL_ENCODED,
                             decoder=list_of(Statistic),
                             validator=validator)


def global_stats(start: date,
                 end: Optional[date] = None,
                 aggregated_by: Optional[StatisticAggregation] = None) -> RequestDescriptor:
    """Estatísticas globais da conta no período.

    Args:
        start (date): Primeiro dia do período.
        end (typing.Optional[date]): Último dia; deve ser posterior a ``start``.
        aggregated_by (typing.Optional[StatisticAggregation]): Agrupamento (dia, semana, mês).

    Returns:
        RequestDescriptor: Descritor cujo modelo é uma lista de Statistic.
    """
    return _stats_request(GLOBAL_STATS_PATH,
                          _period_query(start, end, aggregated_by),
                          lambda: validate_period(start, end))


def category_stats(start: date,
                   categories: List[str],
                   end: Optional[date] = None,
                   aggregated_by: Optional[StatisticAggregation] = None) -> RequestDescriptor:
    def validator():
        validate_period(start, end)
        if len(categories) not in constants.STATISTIC_FILTER_RANGE:
            raise ValidationError(ValidationErrorCode.INVALID_NUMBER_OF_CATEGORIES)

    query = _period_query(start, end, aggregated_by)
    query.extend(('categories', categoria) for categoria in categories)
    return _stats_request(CATEGORY_STATS_PATH, query, validator)


def subuser_stats(start: date,
                  subusers: List[str],
                  end: Optional[date] = None,
                  aggregated_by: Optional[StatisticAggregation] = None) -> RequestDescriptor:
    def validator():
        validate_period(start, end)
        if len(subusers) not in constants.STATISTIC_FILTER_RANGE:
            raise ValidationError(ValidationErrorCode.INVALID_NUMBER_OF_SUBUSERS)

    query = _period_query(start, end, aggregated_by)
    query.extend(('subusers', subuser) for subuser in subusers)
    return _stats_request(SUBUSER_STATS_PATH, query, validator)
