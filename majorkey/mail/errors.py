"""Hierarquia de exceções do cliente da API de emails.

Todas as falhas são terminais e levantadas localmente: nada é repetido
automaticamente. As falhas de validação são sempre detectadas antes de qualquer
I/O de rede, portanto nenhuma requisição parcial chega ao provedor.

Classes principais:
    - MailError: raiz de todas as exceções do pacote
    - ValidationError: erro de validação etiquetado por ValidationErrorCode
    - SessionError: pré-condições de despacho (autenticação, impersonação, URL)
    - TransportError: falhas de rede ou respostas HTTP fora da faixa 2xx
"""
from enum import Enum
from typing import Any, Optional

from . import constants


class MailError(Exception):
    """Exceção base para os erros do cliente de emails."""
    pass


class ValidationErrorCode(Enum):
    """Etiquetas dos erros de validação."""
    MALFORMED_EMAIL_ADDRESS = "malformed_email_address"
    INVALID_CONTENT_TYPE = "invalid_content_type"
    INVALID_CONTENT_ORDER = "invalid_content_order"
    MISSING_CONTENT = "missing_content"
    CONTENT_HAS_EMPTY_STRING = "content_has_empty_string"
    MISSING_RECIPIENTS = "missing_recipients"
    TOO_MANY_RECIPIENTS = "too_many_recipients"
    DUPLICATE_RECIPIENT = "duplicate_recipient"
    MISSING_SUBJECT = "missing_subject"
    INVALID_NUMBER_OF_PERSONALIZATIONS = "invalid_number_of_personalizations"
    HEADER_NOT_ALLOWED = "header_not_allowed"
    MALFORMED_HEADER = "malformed_header"
    TOO_MANY_CATEGORIES = "too_many_categories"
    CATEGORY_TOO_LONG = "category_too_long"
    DUPLICATE_CATEGORY = "duplicate_category"
    TOO_MANY_SUBSTITUTIONS = "too_many_substitutions"
    TOO_MANY_CUSTOM_ARGUMENTS = "too_many_custom_arguments"
    INVALID_SCHEDULE_DATE = "invalid_schedule_date"
    THRESHOLD_OUT_OF_RANGE = "threshold_out_of_range"
    TOO_MANY_UNSUBSCRIBE_GROUPS = "too_many_unsubscribe_groups"
    MISSING_SUBSCRIPTION_TRACKING_TAG = "missing_subscription_tracking_tag"
    INVALID_FILENAME = "invalid_filename"
    INVALID_CONTENT_ID = "invalid_content_id"
    LIMIT_OUT_OF_RANGE = "limit_out_of_range"
    INVALID_END_DATE = "invalid_end_date"
    INVALID_NUMBER_OF_CATEGORIES = "invalid_number_of_categories"
    INVALID_NUMBER_OF_SUBUSERS = "invalid_number_of_subusers"


_MESSAGES = {
    ValidationErrorCode.MALFORMED_EMAIL_ADDRESS:
        "'{value}' não é um endereço de email válido (RFC 5322).",
    ValidationErrorCode.INVALID_CONTENT_TYPE:
        "Content type inválido '{value}': não pode conter ';', ',', espaços ou CRLF e deve ter "
        "pelo menos 3 caracteres.",
    ValidationErrorCode.INVALID_CONTENT_ORDER:
        "O conteúdo em texto plano deve vir primeiro (se presente), seguido do HTML (se presente) "
        "e depois qualquer outro conteúdo.",
    ValidationErrorCode.MISSING_CONTENT:
        "Um Email deve conter pelo menos 1 instância de Content.",
    ValidationErrorCode.CONTENT_HAS_EMPTY_STRING:
        "O valor de um Content deve ter pelo menos 1 caractere.",
    ValidationErrorCode.MISSING_RECIPIENTS:
        "Uma personalização precisa de pelo menos um destinatário.",
    ValidationErrorCode.TOO_MANY_RECIPIENTS:
        f"O total de destinatários (to, cc e bcc de todas as personalizações) não pode exceder "
        f"{constants.RECIPIENT_LIMIT} endereços.",
    ValidationErrorCode.DUPLICATE_RECIPIENT:
        "Cada endereço deve aparecer uma única vez nas personalizações; '{value}' foi incluído "
        "mais de uma vez.",
    ValidationErrorCode.MISSING_SUBJECT:
        "Toda personalização precisa de um assunto não vazio. Defina um assunto global, um "
        "assunto em cada personalização ou um template_id.",
    ValidationErrorCode.INVALID_NUMBER_OF_PERSONALIZATIONS:
        f"Um Email deve conter entre 1 e {constants.PERSONALIZATION_LIMIT} personalizações.",
    ValidationErrorCode.HEADER_NOT_ALLOWED:
        "O cabeçalho '{value}' é reservado e não pode ser usado.",
    ValidationErrorCode.MALFORMED_HEADER:
        "Cabeçalho inválido '{value}': o nome não pode conter espaços.",
    ValidationErrorCode.TOO_MANY_CATEGORIES:
        f"Um email não pode ter mais de {constants.CATEGORY_TOTAL_LIMIT} categorias.",
    ValidationErrorCode.CATEGORY_TOO_LONG:
        f"Uma categoria não pode ter mais de {constants.CATEGORY_CHARACTER_LIMIT} caracteres "
        "(categoria '{value}').",
    ValidationErrorCode.DUPLICATE_CATEGORY:
        "A categoria '{value}' foi especificada mais de uma vez.",
    ValidationErrorCode.TOO_MANY_SUBSTITUTIONS:
        f"Uma personalização não pode ter mais de {constants.SUBSTITUTION_LIMIT} substituições.",
    ValidationErrorCode.TOO_MANY_CUSTOM_ARGUMENTS:
        f"Os custom args de cada personalização não podem exceder "
        f"{constants.CUSTOM_ARGUMENTS_MAXIMUM_BYTES} bytes.",
    ValidationErrorCode.INVALID_SCHEDULE_DATE:
        "Um email não pode ser agendado para mais de 72 horas no futuro.",
    ValidationErrorCode.THRESHOLD_OUT_OF_RANGE:
        "O spam checker aceita apenas limiares entre 1 e 10 (recebido {value}).",
    ValidationErrorCode.TOO_MANY_UNSUBSCRIBE_GROUPS:
        f"O ASM não pode exibir mais de {constants.UNSUBSCRIBE_GROUPS_MAXIMUM_DISPLAY} grupos.",
    ValidationErrorCode.MISSING_SUBSCRIPTION_TRACKING_TAG:
        "Os textos do subscription tracking devem conter a marca '<% %>' indicando onde o link "
        "de descadastro será inserido.",
    ValidationErrorCode.INVALID_FILENAME:
        "Nome de arquivo inválido '{value}': não pode conter ';', espaços ou CRLF.",
    ValidationErrorCode.INVALID_CONTENT_ID:
        "Content ID inválido '{value}': não pode conter ';', espaços ou CRLF.",
    ValidationErrorCode.LIMIT_OUT_OF_RANGE:
        "O limite de paginação deve estar entre 1 e 500 (recebido {value}).",
    ValidationErrorCode.INVALID_END_DATE:
        "A data final não pode ser anterior à data inicial.",
    ValidationErrorCode.INVALID_NUMBER_OF_CATEGORIES:
        "Especifique entre 1 e 10 categorias.",
    ValidationErrorCode.INVALID_NUMBER_OF_SUBUSERS:
        "Especifique entre 1 e 10 subusuários.",
}


class ValidationError(MailError):
    """Erro de validação etiquetado.

    Attributes:
        code (ValidationErrorCode): Etiqueta que identifica a regra violada.
        value (typing.Any): Valor ofensivo, quando existe (endereço, cabeçalho, categoria...).
    """

    def __init__(self,
                 code: ValidationErrorCode,
                 value: Any = None,
                 message: Optional[str] = None):
        self.code = code
        self.value = value
        super().__init__(message or _MESSAGES[code].format(value=value))

    def __repr__(self):
        return f"ValidationError(code={self.code.name}, value={self.value!r})"


class TooManyCustomArgumentsError(ValidationError):
    """Custom args mesclados de uma personalização ultrapassam o limite de bytes."""

    def __init__(self, size: int, rendered: Optional[str]):
        self.size = size
        self.rendered = rendered
        message = (f"{_MESSAGES[ValidationErrorCode.TOO_MANY_CUSTOM_ARGUMENTS]} "
                   f"O email possui {size} bytes.")
        if rendered is not None:
            message += f" Custom args ofensivos: {rendered}"
        super().__init__(ValidationErrorCode.TOO_MANY_CUSTOM_ARGUMENTS,
                         value=(size, rendered),
                         message=message)


class SessionError(MailError):
    """Exceção base para as pré-condições de despacho."""
    pass


class AuthenticationMissing(SessionError):
    def __init__(self):
        super().__init__("Nenhuma autenticação configurada na sessão. Defina a autenticação "
                         "antes de chamar send().")


class UnsupportedAuthentication(SessionError):
    def __init__(self, description: str):
        self.description = description
        super().__init__(f"Autenticação com {description} não é suportada nesta chamada da API.")


class ImpersonationNotAllowed(SessionError):
    def __init__(self):
        super().__init__("A requisição não suporta impersonação via cabeçalho 'On-behalf-of'.")


class RequestConstructionError(SessionError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Não foi possível construir a URL da chamada (path '{path}').")


class TransportError(MailError):
    """Exceção base para falhas de transporte."""
    pass


class NetworkError(TransportError):
    """Nenhuma resposta HTTP foi obtida."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Falha de rede: {reason}")


class HTTPStatusError(TransportError):
    """A resposta HTTP tem status fora da faixa 2xx."""

    def __init__(self, status_code: int, reason: str):
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"Erro HTTP {status_code}: {reason}")
