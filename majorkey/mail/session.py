import logging
from typing import Callable, Optional

import requests

from . import constants
from .errors import (AuthenticationMissing, ImpersonationNotAllowed, NetworkError,
                     UnsupportedAuthentication)
from .request import Authentication, RequestDescriptor
from .response import Response

logger = logging.getLogger(__name__)

CompletionHandler = Callable[[Response], None]


class Session:
    """Despachante de requisições da API.

    Não existe instância global: a sessão é criada uma vez na inicialização da
    aplicação e injetada em quem precisa despachar requisições. Cada chamada a
    ``send`` é independente e realiza exatamente uma requisição HTTP, sem retentativas.

    Attributes:
        authentication (typing.Optional[Authentication]): Credencial usada nas chamadas.
        on_behalf_of (typing.Optional[str]): Subusuário impersonado via ``On-behalf-of``.
        host (str): Host padrão das chamadas.
        http (requests.Session): Transporte HTTP.
    """

    def __init__(self,
                 authentication: Optional[Authentication] = None,
                 on_behalf_of: Optional[str] = None,
                 host: str = constants.API_HOST,
                 http: Optional[requests.Session] = None):
        self.authentication = authentication
        self.on_behalf_of = on_behalf_of
        self.host = host
        self.http = http if http is not None else requests.Session()

    def send(self,
             request: RequestDescriptor,
             completion_handler: Optional[CompletionHandler] = None) -> Response:
        """Valida e despacha uma requisição.

        Args:
            request (RequestDescriptor): Chamada a ser despachada.
            completion_handler (typing.Optional[CompletionHandler]): Invocado com a resposta
                após a troca HTTP.

        Returns:
            Response: Resposta tipada, para qualquer status HTTP recebido.

        Raises:
            AuthenticationMissing: Se nenhuma credencial estiver configurada.
            UnsupportedAuthentication: Se a chamada não aceitar o esquema configurado.
            ValidationError: Se a requisição for inválida; nada é enviado.
            ImpersonationNotAllowed: Se houver ``on_behalf_of`` e a chamada não o aceitar.
            RequestConstructionError: Se a URL não puder ser montada.
            NetworkError: Se nenhuma resposta HTTP for obtida.
        """
        if self.authentication is None:
            raise AuthenticationMissing()
        if not request.supports(self.authentication):
            raise UnsupportedAuthentication(self.authentication.description)

        request.validate()

        url = request.url(self.host)
        headers = {
            'Content-Type' : str(request.content_type),
            'Accept'       : str(request.accept),
            'Authorization': self.authentication.authorization_header,
        }
        if self.on_behalf_of is not None:
            if not request.supports_impersonation:
                raise ImpersonationNotAllowed()
            headers['On-behalf-of'] = self.on_behalf_of

        logger.debug("Despachando %s %s" % (request.method.value, url))
        try:
            http_response = self.http.request(request.method.value,
                                              url,
                                              headers=headers,
                                              data=request.encode_body())
        except requests.RequestException as e:
            logger.error("Falha de rede em %s %s: %s" % (request.method.value, url, str(e)))
            raise NetworkError(str(e)) from e

        response = Response.from_http(http_response, request.decoder)
        logger.debug("Resposta de %s %s: HTTP %d" % (request.method.value,
                                                       url,
                                                       response.status_code))
        if completion_handler is not None:
            completion_handler(response)
        return response

    def close(self) -> None:
        self.http.close()
