from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .types import Address, to_timestamp


@dataclass
class Personalization:
    """Uma "cópia" lógica do email: destinatários próprios e sobrescritas opcionais.

    Se um atributo também estiver definido globalmente no Email (assunto, cabeçalhos,
    custom args), o valor da personalização tem prioridade.
    """
    to: List[Address]  # Pelo menos um destinatário
    cc: Optional[List[Address]] = None
    bcc: Optional[List[Address]] = None
    subject: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    substitutions: Optional[Dict[str, str]] = None  # No máximo 10000 entradas
    custom_args: Optional[Dict[str, str]] = None
    send_at: Optional[datetime] = field(default=None)  # No máximo 72h no futuro

    @classmethod
    def for_recipients(cls, *emails: str) -> 'Personalization':
        """Cria uma personalização apenas com destinatários ``to``.

        Args:
            *emails (str): Endereços dos destinatários.

        Returns:
            Personalization: Personalização sem sobrescritas.
        """
        return cls(to=[Address(email) for email in emails])

    def recipients(self) -> List[Address]:
        """Retorna todos os destinatários (to, cc e bcc, nesta ordem)."""
        return list(self.to) + list(self.cc or []) + list(self.bcc or [])

    def to_dict(self) -> Dict[str, Any]:
        dados: Dict[str, Any] = {'to': [a.to_dict() for a in self.to]}
        if self.cc is not None:
            dados['cc'] = [a.to_dict() for a in self.cc]
        if self.bcc is not None:
            dados['bcc'] = [a.to_dict() for a in self.bcc]
        if self.subject is not None:
            dados['subject'] = self.subject
        if self.headers is not None:
            dados['headers'] = dict(self.headers)
        if self.substitutions is not None:
            dados['substitutions'] = dict(self.substitutions)
        if self.custom_args is not None:
            dados['custom_args'] = dict(self.custom_args)
        if self.send_at is not None:
            dados['send_at'] = to_timestamp(self.send_at)
        return dados
