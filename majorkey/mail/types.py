"""Tipos de valor usados na montagem de um email.

Classes principais:
    - Address: endereço de email com nome de exibição opcional
    - ContentType: tipo MIME normalizado em minúsculas
    - Content: parte do corpo do email
    - Attachment: arquivo anexo (ou imagem inline)
    - ASM: grupo de descadastro (unsubscribe group)
"""
import base64
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Address:
    """Endereço de email imutável."""
    email: str
    name: Optional[str] = None  # Nome de exibição

    def to_dict(self) -> Dict[str, Any]:
        dados = {'email': self.email}
        if self.name is not None:
            dados['name'] = self.name
        return dados


@dataclass(frozen=True)
class ContentType:
    """Tipo MIME ``type/subtype``.

    Os componentes são normalizados para minúsculas na construção, portanto a
    igualdade entre instâncias não diferencia maiúsculas de minúsculas.
    """
    type: str
    subtype: str

    def __post_init__(self):
        object.__setattr__(self, 'type', self.type.lower())
        object.__setattr__(self, 'subtype', self.subtype.lower())

    def __str__(self):
        return f"{self.type}/{self.subtype}"

    @property
    def index(self) -> int:
        """Prioridade usada apenas para ordenar as partes do corpo.

        Returns:
            int: 0 para texto plano, 1 para HTML e 2 para qualquer outro tipo.
        """
        if (self.type, self.subtype) == ('text', 'plain'):
            return 0
        if (self.type, self.subtype) == ('text', 'html'):
            return 1
        return 2

    @classmethod
    def from_string(cls, raw: str) -> Optional['ContentType']:
        """Converte uma string ``type/subtype`` em ContentType.

        Args:
            raw (str): Representação textual do tipo MIME.

        Returns:
            typing.Optional[ContentType]: O tipo, ou None se a string não tiver exatamente
            uma barra.
        """
        partes = raw.split('/')
        if len(partes) != 2:
            return None
        return cls(partes[0], partes[1])


ContentType.FORM_URL_ENCODED = ContentType('application', 'x-www-form-urlencoded')
ContentType.JSON = ContentType('application', 'json')
ContentType.PLAIN_TEXT = ContentType('text', 'plain')
ContentType.HTML = ContentType('text', 'html')
ContentType.CSV = ContentType('application', 'csv')
ContentType.PDF = ContentType('application', 'pdf')
ContentType.ZIP = ContentType('application', 'zip')
ContentType.PNG = ContentType('image', 'png')
ContentType.JPEG = ContentType('image', 'jpeg')


@dataclass(frozen=True)
class Content:
    """Uma parte do corpo do email."""
    content_type: ContentType
    value: str

    def to_dict(self) -> Dict[str, Any]:
        return {'type': str(self.content_type), 'value': self.value}

    @classmethod
    def plain_text(cls, body: str) -> 'Content':
        return cls(ContentType.PLAIN_TEXT, body)

    @classmethod
    def html(cls, body: str) -> 'Content':
        return cls(ContentType.HTML, body)

    @classmethod
    def email_body(cls, plain: str, html: str) -> List['Content']:
        """Retorna o par texto plano + HTML já na ordem exigida pela API."""
        return [cls.plain_text(plain), cls.html(html)]


class ContentDisposition(Enum):
    INLINE = "inline"
    ATTACHMENT = "attachment"


@dataclass
class Attachment:
    """Arquivo anexado ao email.

    Para imagens inline use ``ContentDisposition.INLINE`` e informe ``content_id``,
    referenciando-o no HTML como ``cid:<content_id>``.
    """
    filename: str
    content: bytes
    disposition: ContentDisposition = ContentDisposition.ATTACHMENT
    content_type: Optional[ContentType] = None
    content_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        dados = {
            'content'    : base64.b64encode(self.content).decode('ascii'),
            'filename'   : self.filename,
            'disposition': self.disposition.value,
        }
        if self.content_type is not None:
            dados['type'] = str(self.content_type)
        if self.content_id is not None:
            dados['content_id'] = self.content_id
        return dados


@dataclass
class ASM:
    """Configuração de grupo de descadastro (Advanced Suppression Manager)."""
    group_id: int
    groups_to_display: Optional[List[int]] = field(default=None)

    def to_dict(self) -> Dict[str, Any]:
        dados: Dict[str, Any] = {'group_id': self.group_id}
        if self.groups_to_display is not None:
            dados['groups_to_display'] = list(self.groups_to_display)
        return dados


def to_timestamp(moment: datetime) -> int:
    """Converte um datetime em segundos desde a época (formato usado pela API)."""
    return int(moment.timestamp())
