"""Requisição de envio de email (mail send).

O Email agrega personalizações, corpo, remetente e configurações globais. Ele é
construído uma vez por tentativa de envio, validado, serializado e descartado.

Examples:
    >>> email = Email(personalizations=[Personalization.for_recipients("a@b.com")],
    ...               from_=Address("s@b.com"),
    ...               content=[Content.plain_text("hi")],
    ...               subject="hi")
    >>> email.validate()
    >>> email.to_dict()['personalizations'][0]['to'][0]['email']
    'a@b.com'
"""
import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .personalization import Personalization
from .settings import MailSettings, TrackingSettings
from .types import Address, ASM, Attachment, Content, to_timestamp


@dataclass
class Email:
    personalizations: List[Personalization]  # Entre 1 e 1000
    from_: Address
    content: List[Content]  # Ordem: texto plano, HTML, outros
    subject: Optional[str] = None  # Assunto global; personalizações podem sobrescrever
    reply_to: Optional[Address] = None
    attachments: Optional[List[Attachment]] = None
    template_id: Optional[str] = None
    sections: Optional[Dict[str, str]] = None
    headers: Optional[Dict[str, str]] = None
    categories: Optional[List[str]] = None
    custom_args: Optional[Dict[str, str]] = None
    asm: Optional[ASM] = None
    send_at: Optional[datetime] = None
    batch_id: Optional[str] = None
    ip_pool_name: Optional[str] = None
    mail_settings: MailSettings = field(default_factory=MailSettings)
    tracking_settings: TrackingSettings = field(default_factory=TrackingSettings)

    def validate(self) -> None:
        """Executa o pipeline completo de validação.

        Raises:
            ValidationError: Na primeira regra violada.
        """
        from .validation import validate_email_request
        validate_email_request(self)

    def merged_custom_args(self, personalization: Personalization) -> Dict[str, str]:
        """Mescla os custom args globais com os da personalização.

        Em caso de conflito de chave, prevalece o valor da personalização.

        Args:
            personalization (Personalization): Personalização cujos custom args serão
                mesclados.

        Returns:
            typing.Dict[str, str]: Dicionário mesclado.
        """
        mesclado = dict(self.custom_args or {})
        mesclado.update(personalization.custom_args or {})
        return mesclado

    def to_dict(self) -> Dict[str, Any]:
        """Representação JSON da requisição; chaves ausentes são omitidas, nunca nulas."""
        dados: Dict[str, Any] = {
            'personalizations': [p.to_dict() for p in self.personalizations],
            'from'            : self.from_.to_dict(),
            'content'         : [c.to_dict() for c in self.content],
        }
        if self.subject is not None:
            dados['subject'] = self.subject
        if self.reply_to is not None:
            dados['reply_to'] = self.reply_to.to_dict()
        if self.attachments is not None:
            dados['attachments'] = [a.to_dict() for a in self.attachments]
        if self.template_id is not None:
            dados['template_id'] = self.template_id
        if self.sections is not None:
            dados['sections'] = dict(self.sections)
        if self.headers is not None:
            dados['headers'] = dict(self.headers)
        if self.categories is not None:
            dados['categories'] = list(self.categories)
        if self.custom_args is not None:
            dados['custom_args'] = dict(self.custom_args)
        if self.asm is not None:
            dados['asm'] = self.asm.to_dict()
        if self.send_at is not None:
            dados['send_at'] = to_timestamp(self.send_at)
        if self.batch_id is not None:
            dados['batch_id'] = self.batch_id
        if self.ip_pool_name is not None:
            dados['ip_pool_name'] = self.ip_pool_name
        if self.mail_settings.has_settings:
            dados['mail_settings'] = self.mail_settings.to_dict()
        if self.tracking_settings.has_settings:
            dados['tracking_settings'] = self.tracking_settings.to_dict()
        return dados

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)
