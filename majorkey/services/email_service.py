from typing import Any, Dict, Optional

from flask import current_app

from majorkey.mail import constants
from majorkey.mail.validation import is_valid_email_address
from .email_models import EmailMessage, EmailResult
from .email_providers import EmailProvider, MailJetProvider, MockProvider, SendGridProvider


def as_bool(value: Any) -> bool:
    """Interpreta valores booleanos vindos do JSON ou de variáveis de ambiente."""
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on', 'sim')
    return bool(value)


class EmailValidationService:
    """Serviço responsável pela validação de um endereco de email."""

    @staticmethod
    def is_valid(email: str) -> bool:
        """Valida o formato do endereço de email.

        Args:
            email (str): Endereço de email a ser validado.

        Returns:
            bool: True se o formato do email for válido, False caso contrário.
        """
        return is_valid_email_address(email)

    @staticmethod
    def normalize(email: str) -> str:
        """Normaliza o endereço de email (forma canônica, em minúsculas).

        Args:
            email (str): Endereço de email a ser normalizado.

        Returns:
            str: Endereço de email normalizado.

        Raises:
            ValueError: Se o email for inválido.
        """
        from email_validator import validate_email
        from email_validator.exceptions import EmailNotValidError
        if not isinstance(email, str):
            raise ValueError("Endereço de email inválido.")
        try:
            validado = validate_email(email, check_deliverability=False)
            return validado.normalized.lower()
        except (EmailNotValidError, TypeError) as e:
            raise ValueError("Endereço de email inválido.") from e


class EmailService:
    """Serviço principal para envio de emails."""

    def __init__(self,
                 provider: EmailProvider,
                 default_from_email: str,
                 default_from_name: str = None):
        self.provider = provider
        self.default_from_email = default_from_email
        self.default_from_name = default_from_name

    @classmethod
    def create_from_config(cls, app_config: Dict[str, Any]) -> 'EmailService':
        """Cria instância do EmailService a partir da configuração da aplicação.

        Com ``SEND_EMAIL`` falso é usado o MockProvider; caso contrário ``EMAIL_PROVIDER``
        escolhe entre ``sendgrid`` e ``mailjet``.

        Args:
            app_config (typing.Dict[str, typing.Any]): Dicionário de configuração da app.

        Returns:
            EmailService: Instância configurada.

        Raises:
            ValueError: Se a configuração for inválida ou campos obrigatórios estiverem faltando.
        """
        if not as_bool(app_config.get('SEND_EMAIL', False)):
            provider = MockProvider(log_emails=True)
        else:
            email_provider = app_config.get('EMAIL_PROVIDER', 'sendgrid').lower()

            if email_provider == 'sendgrid':
                api_key = app_config.get('SENDGRID_API_KEY')
                if not api_key:
                    raise ValueError(
                            "SENDGRID_API_KEY é obrigatório quando EMAIL_PROVIDER=sendgrid")
                provider = SendGridProvider(
                        api_key,
                        host=app_config.get('SENDGRID_API_HOST') or constants.API_HOST,
                        on_behalf_of=app_config.get('SENDGRID_ON_BEHALF_OF'))

            elif email_provider == 'mailjet':
                mailjet_config = {
                    'api_key'   : app_config.get('MAILJET_API_KEY'),
                    'api_secret': app_config.get('MAILJET_API_SECRET'),
                }
                missing_fields = [f"MAILJET_{nome.upper()}"
                                  for nome, valor in mailjet_config.items() if not valor]
                if missing_fields:
                    raise ValueError(f"Campos obrigatórios para MailJet: "
                                     f"{', '.join(missing_fields)}")
                provider = MailJetProvider(**mailjet_config)
            else:
                raise ValueError(f"Provedor de email não suportado: {email_provider}")

        default_from_email = app_config.get('EMAIL_SENDER')
        default_from_name = app_config.get('EMAIL_SENDER_NAME', app_config.get('APP_NAME'))

        if not default_from_email:
            raise ValueError("EMAIL_SENDER é obrigatório")

        return cls(provider, default_from_email, default_from_name)

    def send_email(self,
                   to: str,
                   subject: str,
                   text_body: Optional[str] = None,
                   html_body: Optional[str] = None,
                   from_email: Optional[str] = None,
                   from_name: Optional[str] = None,
                   **kwargs) -> EmailResult:
        """Envia um email.

        Args:
            to (str): Email do destinatário.
            subject (str): Assunto do email.
            text_body (typing.Optional[str]): Corpo em texto plano.
            html_body (typing.Optional[str]): Corpo em HTML.
            from_email (typing.Optional[str]): Email do remetente. Se None, usa padrão configurado.
            from_name (typing.Optional[str]): Nome do remetente. Se None, usa padrão configurado.
            **kwargs: Argumentos adicionais para EmailMessage (to_name, reply_to, cc, bcc).

        Returns:
            EmailResult: Resultado do envio.

        Raises:
            EmailProviderError: Em caso de erro no envio.
            ValueError: Para dados inválidos.
        """
        try:
            message = EmailMessage(
                    to=to,
                    subject=subject,
                    text_body=text_body,
                    html_body=html_body,
                    from_email=from_email or self.default_from_email,
                    from_name=from_name or self.default_from_name,
                    **kwargs
            )

            result = self.provider.send(message)

            current_app.logger.debug(
                    "Email enviado via %s: %s - %s (ID: %s)" % (self.provider.get_provider_name(),
                                                                to,
                                                                subject,
                                                                result.message_id if
                                                                result.message_id else 'N/A'))
            return result

        except Exception as e:
            current_app.logger.error("Erro ao enviar email para %s: %s" % (to, str(e)))
            raise

    def get_provider_info(self) -> Dict[str, Any]:
        return {
            'provider_name'    : self.provider.get_provider_name(),
            'default_from'     : self.default_from_email,
            'default_from_name': self.default_from_name
        }
