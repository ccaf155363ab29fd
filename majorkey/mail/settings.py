"""Configurações opcionais de envio (mail settings) e de rastreamento (tracking settings).

Todas as configurações são opt-in: um Email só serializa ``mail_settings`` ou
``tracking_settings`` quando pelo menos uma delas foi definida explicitamente.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


def _compact(dados: Dict[str, Any]) -> Dict[str, Any]:
    return {chave: valor for chave, valor in dados.items() if valor is not None}


@dataclass
class BCCSetting:
    """Envia uma cópia oculta de todo email para o endereço informado."""
    email: Optional[str] = None

    @property
    def enable(self) -> bool:
        return self.email is not None

    def to_dict(self) -> Dict[str, Any]:
        return _compact({'enable': self.enable, 'email': self.email})


@dataclass
class BypassListManagement:
    """Ignora grupos de descadastro e supressões. Apenas para emergências."""
    enable: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {'enable': self.enable}


@dataclass
class Footer:
    text: Optional[str] = None
    html: Optional[str] = None

    @property
    def enable(self) -> bool:
        return self.text is not None and self.html is not None

    def to_dict(self) -> Dict[str, Any]:
        return _compact({'enable': self.enable, 'text': self.text, 'html': self.html})


@dataclass
class SandboxMode:
    """Valida o corpo da requisição sem entregar o email."""
    enable: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {'enable': self.enable}


@dataclass
class SpamChecker:
    threshold: Optional[int] = None  # Entre 1 e 10
    post_to_url: Optional[str] = None

    @property
    def enable(self) -> bool:
        return self.threshold is not None

    def to_dict(self) -> Dict[str, Any]:
        return _compact({'enable'     : self.enable,
                         'threshold'  : self.threshold,
                         'post_to_url': self.post_to_url})


@dataclass
class MailSettings:
    bcc: Optional[BCCSetting] = None
    bypass_list_management: Optional[BypassListManagement] = None
    footer: Optional[Footer] = None
    sandbox_mode: Optional[SandboxMode] = None
    spam_check: Optional[SpamChecker] = None

    @property
    def has_settings(self) -> bool:
        return any(valor is not None for valor in (self.bcc,
                                                    self.bypass_list_management,
                                                    self.footer,
                                                    self.sandbox_mode,
                                                    self.spam_check))

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            'bcc'                   : self.bcc.to_dict() if self.bcc else None,
            'bypass_list_management': (self.bypass_list_management.to_dict()
                                       if self.bypass_list_management else None),
            'footer'                : self.footer.to_dict() if self.footer else None,
            'sandbox_mode'          : self.sandbox_mode.to_dict() if self.sandbox_mode else None,
            'spam_check'            : self.spam_check.to_dict() if self.spam_check else None,
        })


class ClickTrackingSection(Enum):
    OFF = "off"
    HTML_BODY = "html_body"
    PLAIN_TEXT_AND_HTML_BODIES = "plain_text_and_html_bodies"


@dataclass
class ClickTracking:
    section: ClickTrackingSection = ClickTrackingSection.HTML_BODY

    def to_dict(self) -> Dict[str, Any]:
        if self.section is ClickTrackingSection.OFF:
            return {'enable': False}
        return {'enable'     : True,
                'enable_text': self.section is ClickTrackingSection.PLAIN_TEXT_AND_HTML_BODIES}


@dataclass
class GoogleAnalytics:
    source: Optional[str] = None
    medium: Optional[str] = None
    term: Optional[str] = None
    content: Optional[str] = None
    campaign: Optional[str] = None

    @property
    def enable(self) -> bool:
        return any(valor is not None for valor in (self.source, self.medium, self.term,
                                                    self.content, self.campaign))

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            'enable'      : self.enable,
            'utm_source'  : self.source,
            'utm_medium'  : self.medium,
            'utm_term'    : self.term,
            'utm_content' : self.content,
            'utm_campaign': self.campaign,
        })


@dataclass
class OpenTracking:
    """Rastreamento de abertura via pixel.

    Sem ``substitution_tag`` o pixel é inserido no final do email; com ela, no local
    da marca.
    """
    enable: bool = True
    substitution_tag: Optional[str] = None

    @classmethod
    def off(cls) -> 'OpenTracking':
        return cls(enable=False)

    @classmethod
    def at(cls, tag: str) -> 'OpenTracking':
        return cls(enable=True, substitution_tag=tag)

    def to_dict(self) -> Dict[str, Any]:
        return _compact({'enable': self.enable, 'substitution_tag': self.substitution_tag})


@dataclass
class SubscriptionTracking:
    """Insere um link de gerenciamento de inscrição no email.

    Os textos plano e HTML, quando informados, precisam conter a marca ``<% %>``
    indicando onde o link de descadastro será inserido.
    """
    text: Optional[str] = None
    html: Optional[str] = None
    substitution_tag: Optional[str] = None

    @property
    def enable(self) -> bool:
        return (self.text is not None and self.html is not None) or \
            self.substitution_tag is not None

    def to_dict(self) -> Dict[str, Any]:
        return _compact({'enable'          : self.enable,
                         'text'            : self.text,
                         'html'            : self.html,
                         'substitution_tag': self.substitution_tag})


@dataclass
class TrackingSettings:
    click_tracking: Optional[ClickTracking] = None
    google_analytics: Optional[GoogleAnalytics] = None
    open_tracking: Optional[OpenTracking] = None
    subscription_tracking: Optional[SubscriptionTracking] = None

    @property
    def has_settings(self) -> bool:
        return any(valor is not None for valor in (self.click_tracking,
                                                    self.google_analytics,
                                                    self.open_tracking,
                                                    self.subscription_tracking))

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            'click_tracking'       : (self.click_tracking.to_dict()
                                      if self.click_tracking else None),
            'ganalytics'           : (self.google_analytics.to_dict()
                                      if self.google_analytics else None),
            'open_tracking'        : self.open_tracking.to_dict() if self.open_tracking else None,
            'subscription_tracking': (self.subscription_tracking.to_dict()
                                      if self.subscription_tracking else None),
        })
