from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests
from flask import current_app

from majorkey.mail import (Address, Authentication, Content, Email, MailError, Personalization,
                           Session)
from majorkey.mail import constants
from majorkey.mail.endpoints import mail_send_request, mailjet_send_request
from .email_models import EmailMessage, EmailResult


class EmailProviderError(Exception):
    """Exceção base para erros de provedores de email."""
    pass


def build_email(message: EmailMessage) -> Email:
    """Converte uma EmailMessage em uma requisição de envio com uma única personalização.

    Args:
        message (EmailMessage): Mensagem independente do provedor.

    Returns:
        Email: Requisição ainda não validada.
    """
    content = []
    if message.text_body:
        content.append(Content.plain_text(message.text_body))
    if message.html_body:
        content.append(Content.html(message.html_body))

    personalization = Personalization(
            to=[Address(message.to, message.to_name)],
            cc=[Address(e) for e in message.cc] if message.cc else None,
            bcc=[Address(e) for e in message.bcc] if message.bcc else None,
    )
    return Email(personalizations=[personalization],
                 from_=Address(message.from_email, message.from_name),
                 content=content,
                 subject=message.subject,
                 reply_to=Address(message.reply_to) if message.reply_to else None)


class EmailProvider(ABC):
    """Interface abstrata para provedores de email."""

    @abstractmethod
    def send(self, message: EmailMessage) -> EmailResult:
        """Envia um email usando o provedor.

        Args:
            message (EmailMessage): Mensagem a ser enviada.

        Returns:
            EmailResult: Resultado do envio com informações do provedor.

        Raises:
            EmailProviderError: Em caso de erro no envio.
        """
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        pass


class SendGridProvider(EmailProvider):
    """Provedor de email usando a API v3 da SendGrid (autenticação por API key)."""

    def __init__(self,
                 api_key: str,
                 host: str = constants.API_HOST,
                 on_behalf_of: Optional[str] = None,
                 http: Optional[requests.Session] = None):
        """Inicializa o provedor SendGrid.

        Args:
            api_key (str): Chave da API.
            host (str): Host da API.
            on_behalf_of (typing.Optional[str]): Subusuário para impersonação. O endpoint de
                envio não aceita impersonação, portanto envios com este valor falham.
            http (typing.Optional[requests.Session]): Transporte HTTP (injetável nos testes).

        Raises:
            ValueError: Se a chave da API for inválida.
        """
        if not api_key or not isinstance(api_key, str):
            raise ValueError("A chave da API da SendGrid é obrigatória e deve ser uma string.")
        self.session = Session(authentication=Authentication.api_key(api_key),
                               on_behalf_of=on_behalf_of,
                               host=host,
                               http=http)

    def send(self, message: EmailMessage) -> EmailResult:
        try:
            response = self.session.send(mail_send_request(build_email(message)))
            response.raise_for_status()
        except MailError as e:
            raise EmailProviderError(f"Erro ao enviar via SendGrid: {str(e)}") from e

        return EmailResult(
                success=True,
                provider='sendgrid',
                message_id=response.headers.get('X-Message-Id'),
                to=message.to,
                sent_at=datetime.now(timezone.utc).isoformat(),
                status_code=response.status_code,
                raw_response=response
        )

    def get_provider_name(self) -> str:
        return "SendGrid"


class MailJetProvider(EmailProvider):
    """Provedor de email usando a API v3.1 da MailJet (autenticação Basic)."""

    def __init__(self,
                 api_key: str,
                 api_secret: str,
                 host: str = constants.MAILJET_API_HOST,
                 http: Optional[requests.Session] = None):
        if not api_key or not api_secret:
            raise ValueError("A chave e o segredo da API da MailJet são obrigatórios.")
        self.host = host
        self.session = Session(authentication=Authentication.credential(api_key, api_secret),
                               host=host,
                               http=http)

    def send(self, message: EmailMessage) -> EmailResult:
        """Envia o email como uma única mensagem MailJet.

        Args:
            message (EmailMessage): Mensagem a ser enviada.

        Returns:
            EmailResult: Resultado com o primeiro MessageID retornado pela MailJet.

        Raises:
            EmailProviderError: Em caso de erro de validação, de rede ou status HTTP.
        """
        request = mailjet_send_request(
                sender=Address(message.from_email, message.from_name),
                recipients=[Address(message.to, message.to_name)],
                subject=message.subject,
                text=message.text_body,
                html=message.html_body,
                cc=[Address(e) for e in message.cc] if message.cc else None,
                bcc=[Address(e) for e in message.bcc] if message.bcc else None,
        )
        try:
            response = self.session.send(request)
            response.raise_for_status()
        except MailError as e:
            raise EmailProviderError(f"Erro ao enviar via MailJet: {str(e)}") from e

        message_id = None
        if response.model:
            ids = response.model[0].message_ids
            message_id = ids[0] if ids else None

        return EmailResult(
                success=True,
                provider='mailjet',
                message_id=message_id,
                to=message.to,
                sent_at=datetime.now(timezone.utc).isoformat(),
                status_code=response.status_code,
                raw_response=response
        )

    def get_provider_name(self) -> str:
        return "MailJet"


class MockProvider(EmailProvider):
    """Provedor de desenvolvimento: valida a mensagem como a SendGrid e apenas a registra."""

    def __init__(self, log_emails: bool = True):
        self.log_emails = log_emails
        self.sent_emails = []

    def send(self, message: EmailMessage) -> EmailResult:
        import uuid

        email = build_email(message)
        try:
            email.validate()
        except MailError as e:
            raise EmailProviderError(f"Email simulado inválido: {str(e)}") from e

        message_id = str(uuid.uuid4())
        email_info = {
            'message_id': message_id,
            'payload'   : email.to_dict(),
            'to'        : message.to,
            'subject'   : message.subject,
            'text_body' : message.text_body,
            'sent_at'   : datetime.now(timezone.utc).isoformat(),
        }
        self.sent_emails.append(email_info)

        if self.log_emails:
            current_app.logger.debug("=== EMAIL SIMULADO ===")
            current_app.logger.debug("To: %s" % (message.to,))
            current_app.logger.debug("Subject: %s" % (message.subject,))
            current_app.logger.debug(email.to_json(indent=2))
            current_app.logger.debug("======================")

        return EmailResult(
                success=True,
                provider='mock',
                message_id=message_id,
                to=message.to,
                sent_at=email_info['sent_at']
        )

    def get_provider_name(self) -> str:
        return "Mock (Development)"

    def get_sent_emails(self) -> List[Dict[str, Any]]:
        return self.sent_emails.copy()

    def clear_sent_emails(self):
        self.sent_emails.clear()
