"""Cliente da API de envio de emails.

Monta requisições tipadas, valida as restrições do provedor antes de qualquer I/O e
despacha as chamadas por uma Session injetada.
"""
from .email import Email
from .errors import (AuthenticationMissing, HTTPStatusError, ImpersonationNotAllowed, MailError,
                     NetworkError, RequestConstructionError, SessionError,
                     TooManyCustomArgumentsError, TransportError, UnsupportedAuthentication,
                     ValidationError, ValidationErrorCode)
from .personalization import Personalization
from .request import Authentication, HTTPMethod, RequestDescriptor
from .response import Page, Pagination, RateLimit, Response
from .session import Session
from .settings import (BCCSetting, BypassListManagement, ClickTracking, ClickTrackingSection,
                       Footer, GoogleAnalytics, MailSettings, OpenTracking, SandboxMode,
                       SpamChecker, SubscriptionTracking, TrackingSettings)
from .types import Address, ASM, Attachment, Content, ContentDisposition, ContentType
