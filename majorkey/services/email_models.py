from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class EmailMessage:
    """Mensagem de email independente do provedor."""
    to: str  # Endereço de email do destinatário
    subject: str
    text_body: Optional[str] = None  # Corpo em texto plano
    html_body: Optional[str] = None  # Corpo em HTML
    to_name: Optional[str] = None  # Nome de exibição do destinatário
    from_email: Optional[str] = None  # Remetente (padrão: EMAIL_SENDER)
    from_name: Optional[str] = None  # Nome do remetente (padrão: EMAIL_SENDER_NAME)
    reply_to: Optional[str] = None
    cc: Optional[list[str]] = None
    bcc: Optional[list[str]] = None

    def __post_init__(self):
        if not self.text_body and not self.html_body:
            raise ValueError("Email tem que ter text_body ou html_body.")


@dataclass
class EmailResult:
    """Resultado do envio de um email."""
    success: bool
    provider: str = ""  # sendgrid, mailjet ou mock
    message_id: Optional[str] = None  # ID da mensagem retornado pelo provedor
    to: Optional[str] = None
    sent_at: Optional[str] = None  # Data/hora do envio em formato ISO
    status_code: Optional[int] = None  # Status HTTP da resposta do provedor
    raw_response: Optional[Any] = None
