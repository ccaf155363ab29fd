"""Testes do despacho de requisições pela Session."""
import base64
from unittest.mock import Mock

import pytest
import requests

from majorkey.mail import (Authentication, AuthenticationMissing, ContentType, HTTPMethod,
                           ImpersonationNotAllowed, NetworkError, RequestConstructionError,
                           RequestDescriptor, Session, UnsupportedAuthentication,
                           ValidationError, ValidationErrorCode)
from majorkey.mail.endpoints import BLOCKS, list_suppressions, mail_send_request
from tests.utils.test_helpers import make_email, make_http_response, sent_request


class TestAuthentication:

    def test_api_key(self):
        auth = Authentication.api_key("SG.chave")

        assert auth.authorization_header == "Bearer SG.chave"
        assert auth.description == "API Key"

    def test_credencial_basic(self):
        auth = Authentication.credential("usuario", "senha")

        assert auth.authorization_header == "Basic " + base64.b64encode(
                b"usuario:senha").decode('ascii')

    def test_segredo_fora_do_repr(self):
        assert "SG.chave" not in repr(Authentication.api_key("SG.chave"))


class TestSessionSend:

    def test_envio_de_email(self, http):
        session = Session(Authentication.api_key("SG.chave"), http=http)

        response = session.send(mail_send_request(make_email()))

        enviado = sent_request(http)
        assert response.status_code == 202
        assert response.ok
        assert enviado['method'] == "POST"
        assert enviado['url'] == "https://api.sendgrid.com/v3/mail/send"
        assert enviado['headers']['Authorization'] == "Bearer SG.chave"
        assert enviado['headers']['Content-Type'] == "application/json"
        assert enviado['headers']['Accept'] == "application/json"
        assert 'On-behalf-of' not in enviado['headers']
        assert enviado['body']['personalizations'][0]['to'][0]['email'] == "a@b.com"
        assert enviado['body']['content'][0]['value'] == "hi"

    def test_sem_autenticacao(self, http):
        with pytest.raises(AuthenticationMissing):
            Session(http=http).send(mail_send_request(make_email()))

        http.request.assert_not_called()

    def test_envio_de_email_nao_aceita_basic(self, http):
        session = Session(Authentication.credential("u", "p"), http=http)

        with pytest.raises(UnsupportedAuthentication) as excinfo:
            session.send(mail_send_request(make_email()))

        assert excinfo.value.description == "credential"
        http.request.assert_not_called()

    def test_erro_de_validacao_impede_o_envio(self, http):
        session = Session(Authentication.api_key("k"), http=http)

        with pytest.raises(ValidationError) as excinfo:
            session.send(mail_send_request(make_email(personalizations=[])))

        assert excinfo.value.code == ValidationErrorCode.INVALID_NUMBER_OF_PERSONALIZATIONS
        http.request.assert_not_called()

    def test_envio_de_email_nao_aceita_impersonacao(self, http):
        session = Session(Authentication.api_key("k"), on_behalf_of="sub", http=http)

        with pytest.raises(ImpersonationNotAllowed):
            session.send(mail_send_request(make_email()))

        http.request.assert_not_called()

    def test_impersonacao_em_endpoint_de_gerenciamento(self, http):
        http.request.return_value = make_http_response(200, [])
        session = Session(Authentication.credential("u", "p"), on_behalf_of="sub", http=http)

        session.send(list_suppressions(BLOCKS))

        enviado = sent_request(http)
        assert enviado['method'] == "GET"
        assert enviado['headers']['On-behalf-of'] == "sub"
        assert enviado['headers']['Content-Type'] == "application/x-www-form-urlencoded"
        assert enviado['body'] is None

    def test_path_malformado(self, http):
        session = Session(Authentication.api_key("k"), http=http)

        with pytest.raises(RequestConstructionError) as excinfo:
            session.send(RequestDescriptor(method=HTTPMethod.GET, path="sem barra"))

        assert excinfo.value.path == "sem barra"
        http.request.assert_not_called()

    def test_falha_de_rede(self, http):
        http.request.side_effect = requests.ConnectionError("conexão recusada")
        session = Session(Authentication.api_key("k"), http=http)

        with pytest.raises(NetworkError) as excinfo:
            session.send(mail_send_request(make_email()))

        assert "conexão recusada" in excinfo.value.reason
        assert isinstance(excinfo.value.__cause__, requests.ConnectionError)

    def test_status_de_erro_nao_levanta_excecao(self, http):
        http.request.return_value = make_http_response(400, {'errors': [{'message': 'x'}]})
        session = Session(Authentication.api_key("k"), http=http)

        response = session.send(mail_send_request(make_email()))

        assert response.status_code == 400
        assert not response.ok
        assert response.json() == {'errors': [{'message': 'x'}]}

    def test_callback_recebe_a_resposta(self, http):
        session = Session(Authentication.api_key("k"), http=http)
        handler = Mock()

        response = session.send(mail_send_request(make_email()), handler)

        handler.assert_called_once_with(response)

    def test_host_do_descritor_prevalece(self, http):
        session = Session(Authentication.api_key("k"), http=http)

        session.send(RequestDescriptor(method=HTTPMethod.GET, path="/v1/ping",
                                       host="https://outro.host/"))

        assert sent_request(http)['url'] == "https://outro.host/v1/ping"

    def test_content_type_invalido_impede_o_envio(self, http):
        session = Session(Authentication.api_key("k"), http=http)
        request = RequestDescriptor(method=HTTPMethod.GET, path="/v1/ping",
                                    accept=ContentType('a', 'b;c'))

        with pytest.raises(ValidationError) as excinfo:
            session.send(request)

        assert excinfo.value.code == ValidationErrorCode.INVALID_CONTENT_TYPE
        assert excinfo.value.value == "a/b;c"
        http.request.assert_not_called()
