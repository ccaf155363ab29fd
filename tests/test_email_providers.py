"""Testes dos provedores de email."""
import pytest

from majorkey.mail import ContentType
from majorkey.services.email_models import EmailMessage
from majorkey.services.email_providers import (build_email, EmailProviderError, MailJetProvider,
                                               MockProvider, SendGridProvider)
from tests.utils.test_helpers import make_http_response, sent_request


def make_message(**overrides) -> EmailMessage:
    campos = {
        'to'        : "me@majorkey.io",
        'to_name'   : "Me",
        'subject'   : "[Major 🔑] comprar pão",
        'text_body' : "comprar pão",
        'from_email': "notes@majorkey.io",
        'from_name' : "Major Key",
    }
    campos.update(overrides)
    return EmailMessage(**campos)


class TestEmailMessage:

    def test_mensagem_sem_corpo(self):
        with pytest.raises(ValueError):
            EmailMessage(to="me@majorkey.io", subject="x")

    def test_build_email(self):
        email = build_email(make_message(html_body="<p>comprar pão</p>", cc=["c@majorkey.io"]))

        assert [c.content_type for c in email.content] == [ContentType.PLAIN_TEXT,
                                                           ContentType.HTML]
        assert email.personalizations[0].to[0].name == "Me"
        assert email.personalizations[0].cc[0].email == "c@majorkey.io"
        assert email.from_.name == "Major Key"
        email.validate()


class TestSendGridProvider:

    def test_chave_obrigatoria(self):
        with pytest.raises(ValueError):
            SendGridProvider("")

    def test_envio(self, http):
        http.request.return_value = make_http_response(202, headers={'X-Message-Id': 'sg-1'})
        provider = SendGridProvider("SG.chave", http=http)

        result = provider.send(make_message())

        enviado = sent_request(http)
        assert result.success
        assert result.provider == 'sendgrid'
        assert result.message_id == 'sg-1'
        assert result.status_code == 202
        assert enviado['url'] == "https://api.sendgrid.com/v3/mail/send"
        assert enviado['body']['subject'] == "[Major 🔑] comprar pão"
        assert enviado['body']['personalizations'][0]['to'] == [{'email': 'me@majorkey.io',
                                                                 'name' : 'Me'}]

    def test_status_de_erro(self, http):
        http.request.return_value = make_http_response(401, {'errors': [{'message': 'auth'}]})
        provider = SendGridProvider("SG.chave", http=http)

        with pytest.raises(EmailProviderError) as excinfo:
            provider.send(make_message())

        assert "401" in str(excinfo.value)

    def test_destinatario_invalido_nao_chega_ao_transporte(self, http):
        provider = SendGridProvider("SG.chave", http=http)

        with pytest.raises(EmailProviderError):
            provider.send(make_message(to="sem-arroba"))

        http.request.assert_not_called()

    def test_impersonacao_configurada_falha_no_envio(self, http):
        provider = SendGridProvider("SG.chave", on_behalf_of="sub", http=http)

        with pytest.raises(EmailProviderError):
            provider.send(make_message())

        http.request.assert_not_called()


class TestMailJetProvider:

    def test_credenciais_obrigatorias(self):
        with pytest.raises(ValueError):
            MailJetProvider("chave", "")

    def test_envio(self, http):
        http.request.return_value = make_http_response(200, {'Messages': [
            {'Status': 'success', 'To': [{'Email': 'me@majorkey.io', 'MessageID': 987}]},
        ]})
        provider = MailJetProvider("chave", "segredo", http=http)

        result = provider.send(make_message())

        enviado = sent_request(http)
        assert result.provider == 'mailjet'
        assert result.message_id == "987"
        assert enviado['url'] == "https://api.mailjet.com/v3.1/send"
        assert enviado['headers']['Authorization'].startswith("Basic ")
        assert enviado['body']['Messages'][0]['To'] == [{'Email': 'me@majorkey.io',
                                                         'Name' : 'Me'}]

    def test_envio_somente_html(self, http):
        http.request.return_value = make_http_response(200, {'Messages': [
            {'Status': 'success', 'To': [{'Email': 'me@majorkey.io', 'MessageID': 5}]},
        ]})
        provider = MailJetProvider("chave", "segredo", http=http)

        result = provider.send(make_message(text_body=None, html_body="<p>comprar pão</p>"))

        mensagem = sent_request(http)['body']['Messages'][0]
        assert result.message_id == "5"
        assert mensagem['HTMLPart'] == "<p>comprar pão</p>"
        assert 'TextPart' not in mensagem

    def test_falha_de_rede(self, http):
        import requests
        http.request.side_effect = requests.Timeout("tempo esgotado")
        provider = MailJetProvider("chave", "segredo", http=http)

        with pytest.raises(EmailProviderError):
            provider.send(make_message())


class TestMockProvider:

    def test_registra_o_envio(self, app_context):
        provider = MockProvider()

        result = provider.send(make_message())

        enviados = provider.get_sent_emails()
        assert result.provider == 'mock'
        assert len(enviados) == 1
        assert enviados[0]['message_id'] == result.message_id
        assert enviados[0]['payload']['from'] == {'email': 'notes@majorkey.io',
                                                  'name' : 'Major Key'}

        provider.clear_sent_emails()
        assert provider.get_sent_emails() == []

    def test_valida_como_o_envio_real(self, app_context):
        provider = MockProvider()

        with pytest.raises(EmailProviderError):
            provider.send(make_message(subject=""))

        assert provider.get_sent_emails() == []
