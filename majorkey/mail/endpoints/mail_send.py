from ..email import Email
from ..request import BEARER, HTTPMethod, RequestDescriptor

MAIL_SEND_PATH = "/v3/mail/send"


def mail_send_request(email: Email) -> RequestDescriptor:
    """Cria a chamada ``POST /v3/mail/send`` para o email informado.

    O endpoint aceita apenas autenticação por API key e não permite impersonação.
    A validação completa do email é executada pela sessão antes do despacho.

    Args:
        email (Email): Requisição de envio.

    Returns:
        RequestDescriptor: Descritor pronto para ``Session.send``.
    """
    return RequestDescriptor(method=HTTPMethod.POST,
                             path=MAIL_SEND_PATH,
                             body=email,
                             validator=email.validate,
                             supports_impersonation=False,
                             auth_schemes=frozenset({BEARER}))
