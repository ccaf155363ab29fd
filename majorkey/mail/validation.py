"""Validadores das entidades do email e o pipeline de validação da requisição.

Cada entidade possui uma função ``validate_*`` pura, sem efeitos colaterais e sem
I/O, que levanta ValidationError na primeira regra violada. O pipeline
``validate_email_request`` compõe essas funções na ordem abaixo, executando as
verificações estruturais baratas antes das varreduras agregadas:

    1. quantidade de personalizações
    2. presença, validade e ordem do conteúdo; anexos
    3. personalizações e agregação de destinatários (duplicidade e total)
    4. presença de assunto
    5. remetente e reply-to
    6. cabeçalhos globais
    7. categorias
    8. tamanho dos custom args mesclados por personalização
    9. grupos de descadastro (ASM)
    10. agendamento global
    11. mail settings e tracking settings
"""
import json
import re
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from email_validator import EmailNotValidError, validate_email

from . import constants
from .email import Email
from .errors import TooManyCustomArgumentsError, ValidationError, ValidationErrorCode
from .personalization import Personalization
from .settings import MailSettings, TrackingSettings
from .types import Address, ASM, Attachment, Content, ContentType

# Sem ';', ',' ou espaços em branco (inclui CR e LF), com pelo menos um caractere
_NO_CLRF = re.compile(r"[^;,\s]+")
_WHITESPACE = re.compile(r'\s')
_SUBSCRIPTION_TAG = re.compile(r'<% .*%>')


def is_valid_email_address(email: str) -> bool:
    """Verifica o formato de um endereço de email, sem consultar DNS.

    Args:
        email (str): Endereço a ser verificado.

    Returns:
        bool: True se o endereço for sintaticamente válido.
    """
    if not isinstance(email, str):
        return False
    try:
        validate_email(email, check_deliverability=False)
        return True
    except (EmailNotValidError, TypeError):
        return False


def has_no_clrf(value: str) -> bool:
    return bool(_NO_CLRF.fullmatch(value))


def validate_address(address: Address) -> None:
    if not is_valid_email_address(address.email):
        raise ValidationError(ValidationErrorCode.MALFORMED_EMAIL_ADDRESS, address.email)


def validate_content_type(content_type: ContentType) -> None:
    descricao = str(content_type)
    if len(descricao) < 3 or not has_no_clrf(descricao):
        raise ValidationError(ValidationErrorCode.INVALID_CONTENT_TYPE, descricao)


def validate_content(content: Content) -> None:
    if not content.value:
        raise ValidationError(ValidationErrorCode.CONTENT_HAS_EMPTY_STRING)
    validate_content_type(content.content_type)


def validate_content_sequence(contents: List[Content]) -> None:
    """Valida cada parte do corpo e a ordem texto plano < HTML < outros.

    Args:
        contents (typing.List[Content]): Partes do corpo, na ordem de envio.

    Raises:
        ValidationError: MISSING_CONTENT se a lista estiver vazia; INVALID_CONTENT_ORDER
            se o índice de prioridade diminuir em algum ponto da sequência.
    """
    if not contents:
        raise ValidationError(ValidationErrorCode.MISSING_CONTENT)
    ultimo_indice = 0
    for content in contents:
        validate_content(content)
        if content.content_type.index < ultimo_indice:
            raise ValidationError(ValidationErrorCode.INVALID_CONTENT_ORDER)
        ultimo_indice = content.content_type.index


def validate_attachment(attachment: Attachment) -> None:
    if attachment.content_type is not None:
        validate_content_type(attachment.content_type)
    if attachment.content_id is not None and not has_no_clrf(attachment.content_id):
        raise ValidationError(ValidationErrorCode.INVALID_CONTENT_ID, attachment.content_id)
    if not has_no_clrf(attachment.filename):
        raise ValidationError(ValidationErrorCode.INVALID_FILENAME, attachment.filename)


def validate_headers(headers: Optional[Dict[str, str]]) -> None:
    """Rejeita cabeçalhos reservados (sem diferenciar maiúsculas) e nomes com espaços."""
    if not headers:
        return
    for nome in headers:
        if nome.lower() in constants.RESERVED_HEADERS:
            raise ValidationError(ValidationErrorCode.HEADER_NOT_ALLOWED, nome)
        if _WHITESPACE.search(nome):
            raise ValidationError(ValidationErrorCode.MALFORMED_HEADER, nome)


def validate_send_at(send_at: Optional[datetime], now: Optional[datetime] = None) -> None:
    """Garante que o agendamento não ultrapassa 72 horas a partir de agora.

    Args:
        send_at (typing.Optional[datetime]): Momento do envio. Datetimes ingênuos são
            comparados com o horário local.
        now (typing.Optional[datetime]): Referência de "agora"; usada nos testes.

    Raises:
        ValidationError: INVALID_SCHEDULE_DATE se o envio estiver além do limite.
    """
    if send_at is None:
        return
    if now is None:
        now = datetime.now(timezone.utc) if send_at.tzinfo else datetime.now()
    if send_at - now > constants.SCHEDULE_LIMIT:
        raise ValidationError(ValidationErrorCode.INVALID_SCHEDULE_DATE)


def validate_personalization(personalization: Personalization,
                             now: Optional[datetime] = None) -> None:
    if not personalization.to:
        raise ValidationError(ValidationErrorCode.MISSING_RECIPIENTS)
    validate_headers(personalization.headers)
    validate_send_at(personalization.send_at, now)
    for address in personalization.recipients():
        validate_address(address)
    if personalization.subject is not None and not personalization.subject:
        raise ValidationError(ValidationErrorCode.MISSING_SUBJECT)
    if personalization.substitutions is not None and \
            len(personalization.substitutions) > constants.SUBSTITUTION_LIMIT:
        raise ValidationError(ValidationErrorCode.TOO_MANY_SUBSTITUTIONS)


def validate_recipients(personalizations: Iterable[Personalization],
                        now: Optional[datetime] = None) -> int:
    """Valida cada personalização e agrega seus destinatários.

    Os endereços são comparados em minúsculas; a primeira repetição interrompe a
    varredura. O limite total é verificado apenas depois da varredura completa.

    Returns:
        int: Total de destinatários únicos.

    Raises:
        ValidationError: DUPLICATE_RECIPIENT (com o endereço em minúsculas) ou
            TOO_MANY_RECIPIENTS, além dos erros de validate_personalization.
    """
    vistos = set()
    for personalization in personalizations:
        validate_personalization(personalization, now)
        for address in personalization.recipients():
            email = address.email.lower()
            if email in vistos:
                raise ValidationError(ValidationErrorCode.DUPLICATE_RECIPIENT, email)
            vistos.add(email)
    if len(vistos) > constants.RECIPIENT_LIMIT:
        raise ValidationError(ValidationErrorCode.TOO_MANY_RECIPIENTS)
    return len(vistos)


def validate_subject(email: Email) -> None:
    if email.subject or email.template_id is not None:
        return
    if not all(p.subject for p in email.personalizations):
        raise ValidationError(ValidationErrorCode.MISSING_SUBJECT)


def validate_categories(categories: Optional[List[str]]) -> None:
    if categories is None:
        return
    if len(categories) > constants.CATEGORY_TOTAL_LIMIT:
        raise ValidationError(ValidationErrorCode.TOO_MANY_CATEGORIES)
    vistas = set()
    for categoria in categories:
        if len(categoria) > constants.CATEGORY_CHARACTER_LIMIT:
            raise ValidationError(ValidationErrorCode.CATEGORY_TOO_LONG, categoria)
        minuscula = categoria.lower()
        if minuscula in vistas:
            raise ValidationError(ValidationErrorCode.DUPLICATE_CATEGORY, minuscula)
        vistas.add(minuscula)


def render_custom_args(custom_args: Dict[str, str]) -> bytes:
    """Codifica custom args em JSON compacto UTF-8, como enviado ao provedor."""
    return json.dumps(custom_args, ensure_ascii=False, separators=(',', ':')).encode('utf-8')


def validate_custom_args(email: Email) -> None:
    for personalization in email.personalizations:
        renderizado = render_custom_args(email.merged_custom_args(personalization))
        if len(renderizado) > constants.CUSTOM_ARGUMENTS_MAXIMUM_BYTES:
            raise TooManyCustomArgumentsError(len(renderizado), renderizado.decode('utf-8'))


def validate_asm(asm: Optional[ASM]) -> None:
    if asm is None or asm.groups_to_display is None:
        return
    if len(asm.groups_to_display) > constants.UNSUBSCRIBE_GROUPS_MAXIMUM_DISPLAY:
        raise ValidationError(ValidationErrorCode.TOO_MANY_UNSUBSCRIBE_GROUPS)


def validate_mail_settings(settings: MailSettings) -> None:
    if settings.bcc is not None and settings.bcc.email is not None:
        if not is_valid_email_address(settings.bcc.email):
            raise ValidationError(ValidationErrorCode.MALFORMED_EMAIL_ADDRESS,
                                  settings.bcc.email)
    if settings.spam_check is not None and settings.spam_check.threshold is not None:
        if settings.spam_check.threshold not in constants.SPAM_THRESHOLD_RANGE:
            raise ValidationError(ValidationErrorCode.THRESHOLD_OUT_OF_RANGE,
                                  settings.spam_check.threshold)


def validate_tracking_settings(settings: TrackingSettings) -> None:
    tracking = settings.subscription_tracking
    if tracking is None:
        return
    for corpo in (tracking.text, tracking.html):
        if corpo is not None and not _SUBSCRIPTION_TAG.search(corpo):
            raise ValidationError(ValidationErrorCode.MISSING_SUBSCRIPTION_TRACKING_TAG)


def validate_email_request(email: Email, now: Optional[datetime] = None) -> None:
    """Executa o pipeline de validação do Email, interrompendo na primeira falha.

    Args:
        email (Email): Requisição a ser validada.
        now (typing.Optional[datetime]): Referência de "agora" para os agendamentos.

    Raises:
        ValidationError: Na primeira regra violada.
    """
    if not 1 <= len(email.personalizations) <= constants.PERSONALIZATION_LIMIT:
        raise ValidationError(ValidationErrorCode.INVALID_NUMBER_OF_PERSONALIZATIONS)

    validate_content_sequence(email.content)
    for attachment in email.attachments or []:
        validate_attachment(attachment)

    validate_recipients(email.personalizations, now)
    validate_subject(email)

    validate_address(email.from_)
    if email.reply_to is not None:
        validate_address(email.reply_to)

    validate_headers(email.headers)
    validate_categories(email.categories)
    validate_custom_args(email)
    validate_asm(email.asm)
    validate_send_at(email.send_at, now)

    validate_mail_settings(email.mail_settings)
    validate_tracking_settings(email.tracking_settings)
