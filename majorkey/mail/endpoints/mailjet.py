"""Envio pela API v3.1 da MailJet, despachado pela mesma Session.

A MailJet usa host próprio e autenticação Basic (API key e secret).
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .. import constants
from ..errors import ValidationError, ValidationErrorCode
from ..request import BASIC, HTTPMethod, RequestDescriptor
from ..types import Address
from ..validation import validate_address

MAILJET_SEND_PATH = "/v3.1/send"


@dataclass(frozen=True)
class MailJetMessageStatus:
    status: str
    message_ids: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status == 'success'


def decode_send_result(payload: Dict[str, Any]) -> List[MailJetMessageStatus]:
    return [MailJetMessageStatus(status=mensagem['Status'],
                                 message_ids=[str(d['MessageID']) for d in mensagem.get('To', [])])
            for mensagem in payload['Messages']]


def _participant(address: Address) -> Dict[str, str]:
    dados = {'Email': address.email}
    if address.name is not None:
        dados['Name'] = address.name
    return dados


def mailjet_send_request(sender: Address,
                         recipients: List[Address],
                         subject: str,
                         text: Optional[str],
                         html: Optional[str] = None,
                         cc: Optional[List[Address]] = None,
                         bcc: Optional[List[Address]] = None) -> RequestDescriptor:
    """Cria a chamada ``POST /v3.1/send`` com uma única mensagem.

    Args:
        sender (Address): Remetente.
        recipients (typing.List[Address]): Destinatários (pelo menos um).
        subject (str): Assunto.
        text (typing.Optional[str]): Corpo em texto plano (``TextPart``). O corpo em texto
            ou em HTML precisa ser informado.
        html (typing.Optional[str]): Corpo em HTML (``HTMLPart``).
        cc (typing.Optional[typing.List[Address]]): Destinatários em cópia.
        bcc (typing.Optional[typing.List[Address]]): Destinatários em cópia oculta.

    Returns:
        RequestDescriptor: Descritor cujo modelo é uma lista de MailJetMessageStatus.
    """
    mensagem: Dict[str, Any] = {
        'From'    : _participant(sender),
        'To'      : [_participant(r) for r in recipients],
        'Subject' : subject,
    }
    if text is not None:
        mensagem['TextPart'] = text
    if html is not None:
        mensagem['HTMLPart'] = html
    if cc:
        mensagem['Cc'] = [_participant(c) for c in cc]
    if bcc:
        mensagem['Bcc'] = [_participant(b) for b in bcc]

    def validator():
        if not recipients:
            raise ValidationError(ValidationErrorCode.MISSING_RECIPIENTS)
        validate_address(sender)
        for recipient in [*recipients, *(cc or []), *(bcc or [])]:
            validate_address(recipient)
        if not subject:
            raise ValidationError(ValidationErrorCode.MISSING_SUBJECT)
        if not text and not html:
            raise ValidationError(ValidationErrorCode.CONTENT_HAS_EMPTY_STRING)

    return RequestDescriptor(method=HTTPMethod.POST,
                             path=MAILJET_SEND_PATH,
                             body={'Messages': [mensagem]},
                             decoder=decode_send_result,
                             validator=validator,
                             supports_impersonation=False,
                             auth_schemes=frozenset({BASIC}),
                             host=constants.MAILJET_API_HOST)
