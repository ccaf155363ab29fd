"""Testes do pipeline de validação do Email."""
import json
from datetime import datetime, timedelta, timezone

import pytest

from majorkey.mail import (Address, ASM, Attachment, BCCSetting, Content, ContentType,
                           MailSettings, Personalization, SpamChecker, SubscriptionTracking,
                           TooManyCustomArgumentsError, TrackingSettings, ValidationError,
                           ValidationErrorCode)
from majorkey.mail.validation import (render_custom_args, validate_address, validate_attachment,
                                      validate_content_type, validate_email_request,
                                      validate_headers, validate_personalization)
from tests.utils.test_helpers import addresses, make_email


def assert_code(excinfo, code):
    assert excinfo.value.code == code


class TestPersonalizationCount:

    def test_sem_personalizacoes_falha(self):
        email = make_email(personalizations=[])

        with pytest.raises(ValidationError) as excinfo:
            email.validate()

        assert_code(excinfo, ValidationErrorCode.INVALID_NUMBER_OF_PERSONALIZATIONS)

    def test_mil_personalizacoes_validas(self):
        personalizations = [Personalization(to=[a]) for a in addresses(1000)]
        email = make_email(personalizations=personalizations)

        email.validate()

    def test_mil_e_uma_personalizacoes_falha(self):
        personalizations = [Personalization(to=[a]) for a in addresses(1001)]
        email = make_email(personalizations=personalizations)

        with pytest.raises(ValidationError) as excinfo:
            email.validate()

        assert_code(excinfo, ValidationErrorCode.INVALID_NUMBER_OF_PERSONALIZATIONS)


class TestContent:

    def test_html_antes_de_texto_plano_falha(self):
        email = make_email(content=[Content.html("<p>hi</p>"), Content.plain_text("hi")])

        with pytest.raises(ValidationError) as excinfo:
            email.validate()

        assert_code(excinfo, ValidationErrorCode.INVALID_CONTENT_ORDER)

    @pytest.mark.parametrize('content', [
        [Content.plain_text("hi"), Content.html("<p>hi</p>")],
        [Content.plain_text("hi"), Content.html("<p>hi</p>"),
         Content(ContentType.from_string("text/calendar"), "BEGIN:VCALENDAR")],
        [Content.html("<p>hi</p>")],
    ])
    def test_ordem_valida(self, content):
        make_email(content=content).validate()

    def test_outro_tipo_antes_de_html_falha(self):
        email = make_email(content=[Content(ContentType.CSV, "a,b"), Content.html("<p>hi</p>")])

        with pytest.raises(ValidationError) as excinfo:
            email.validate()

        assert_code(excinfo, ValidationErrorCode.INVALID_CONTENT_ORDER)

    def test_sem_conteudo_falha(self):
        with pytest.raises(ValidationError) as excinfo:
            make_email(content=[]).validate()

        assert_code(excinfo, ValidationErrorCode.MISSING_CONTENT)

    def test_conteudo_vazio_falha(self):
        with pytest.raises(ValidationError) as excinfo:
            make_email(content=[Content.plain_text("")]).validate()

        assert_code(excinfo, ValidationErrorCode.CONTENT_HAS_EMPTY_STRING)

    @pytest.mark.parametrize('content_type', [
        ContentType('a', ''),
        ContentType('text', 'plain; charset=utf-8'),
        ContentType('text', 'pla in'),
        ContentType('text', 'plain,html'),
        ContentType('text', 'plain\r\n'),
    ])
    def test_content_type_invalido(self, content_type):
        with pytest.raises(ValidationError) as excinfo:
            validate_content_type(content_type)

        assert_code(excinfo, ValidationErrorCode.INVALID_CONTENT_TYPE)


class TestAttachments:

    def test_anexo_valido(self):
        attachment = Attachment(filename="nota.txt", content=b"hi",
                                content_type=ContentType.PLAIN_TEXT)

        validate_attachment(attachment)

    @pytest.mark.parametrize('filename', ["minha nota.txt", "a;b.txt", "a\r\nb.txt", ""])
    def test_nome_de_arquivo_invalido(self, filename):
        with pytest.raises(ValidationError) as excinfo:
            validate_attachment(Attachment(filename=filename, content=b"hi"))

        assert_code(excinfo, ValidationErrorCode.INVALID_FILENAME)

    def test_content_id_invalido(self):
        attachment = Attachment(filename="logo.png", content=b"\x89PNG", content_id="logo id")

        with pytest.raises(ValidationError) as excinfo:
            validate_attachment(attachment)

        assert_code(excinfo, ValidationErrorCode.INVALID_CONTENT_ID)
        assert excinfo.value.value == "logo id"

    def test_anexo_invalido_interrompe_o_pipeline(self):
        email = make_email(attachments=[Attachment(filename="a b", content=b"x")])

        with pytest.raises(ValidationError) as excinfo:
            email.validate()

        assert_code(excinfo, ValidationErrorCode.INVALID_FILENAME)


class TestRecipients:

    def test_destinatario_duplicado_entre_personalizacoes(self):
        email = make_email(personalizations=[
            Personalization(to=[Address("Foo@Example.com")]),
            Personalization(to=[Address("Foo@Example.com")]),
        ])

        with pytest.raises(ValidationError) as excinfo:
            email.validate()

        assert_code(excinfo, ValidationErrorCode.DUPLICATE_RECIPIENT)
        assert excinfo.value.value == "foo@example.com"
        assert str(excinfo.value).count("foo@example.com") == 1

    def test_duplicidade_ignora_maiusculas_entre_to_e_bcc(self):
        email = make_email(personalizations=[
            Personalization(to=[Address("ana@b.com")]),
            Personalization(to=[Address("bia@b.com")], bcc=[Address("ANA@B.COM")]),
        ])

        with pytest.raises(ValidationError) as excinfo:
            email.validate()

        assert excinfo.value.value == "ana@b.com"

    def test_mil_destinatarios_unicos(self):
        email = make_email(personalizations=[
            Personalization(to=addresses(400), cc=addresses(100, start=400)),
            Personalization(to=addresses(500, start=500)),
        ])

        email.validate()

    def test_mil_e_um_destinatarios_falha(self):
        email = make_email(personalizations=[
            Personalization(to=addresses(500)),
            Personalization(to=addresses(500, start=500), bcc=addresses(1, start=1000)),
        ])

        with pytest.raises(ValidationError) as excinfo:
            email.validate()

        assert_code(excinfo, ValidationErrorCode.TOO_MANY_RECIPIENTS)

    def test_personalizacao_sem_destinatario(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_personalization(Personalization(to=[]))

        assert_code(excinfo, ValidationErrorCode.MISSING_RECIPIENTS)

    @pytest.mark.parametrize('email', ["sem-arroba", "a b@c.com", "a@", "@b.com", ""])
    def test_endereco_malformado(self, email):
        with pytest.raises(ValidationError) as excinfo:
            validate_address(Address(email))

        assert_code(excinfo, ValidationErrorCode.MALFORMED_EMAIL_ADDRESS)

    def test_remetente_malformado(self):
        with pytest.raises(ValidationError) as excinfo:
            make_email(from_=Address("remetente")).validate()

        assert_code(excinfo, ValidationErrorCode.MALFORMED_EMAIL_ADDRESS)
        assert excinfo.value.value == "remetente"

    def test_reply_to_malformado(self):
        with pytest.raises(ValidationError) as excinfo:
            make_email(reply_to=Address("responder")).validate()

        assert_code(excinfo, ValidationErrorCode.MALFORMED_EMAIL_ADDRESS)

    def test_substituicoes_demais(self):
        personalization = Personalization(to=[Address("a@b.com")],
                                          substitutions={f"-k{i}-": "v" for i in range(10001)})

        with pytest.raises(ValidationError) as excinfo:
            validate_personalization(personalization)

        assert_code(excinfo, ValidationErrorCode.TOO_MANY_SUBSTITUTIONS)


class TestSubject:

    def test_assunto_global(self):
        make_email(subject="oi").validate()

    def test_template_dispensa_assunto(self):
        make_email(subject=None, template_id="d-123").validate()

    def test_assunto_em_todas_as_personalizacoes(self):
        email = make_email(subject=None, personalizations=[
            Personalization(to=[Address("a@b.com")], subject="um"),
            Personalization(to=[Address("c@b.com")], subject="dois"),
        ])

        email.validate()

    def test_personalizacao_sem_assunto_falha(self):
        email = make_email(subject=None, personalizations=[
            Personalization(to=[Address("a@b.com")], subject="um"),
            Personalization(to=[Address("c@b.com")]),
        ])

        with pytest.raises(ValidationError) as excinfo:
            email.validate()

        assert_code(excinfo, ValidationErrorCode.MISSING_SUBJECT)

    def test_assunto_global_vazio_falha(self):
        with pytest.raises(ValidationError) as excinfo:
            make_email(subject="").validate()

        assert_code(excinfo, ValidationErrorCode.MISSING_SUBJECT)


class TestHeaders:

    @pytest.mark.parametrize('name', ["Content-Type", "content-type", "CONTENT-TYPE",
                                      "X-SG-ID", "Reply-To", "dkim-signature"])
    def test_cabecalho_reservado(self, name):
        with pytest.raises(ValidationError) as excinfo:
            make_email(headers={name: "valor"}).validate()

        assert_code(excinfo, ValidationErrorCode.HEADER_NOT_ALLOWED)
        assert excinfo.value.value == name

    def test_cabecalho_personalizado_passa(self):
        make_email(headers={"X-Custom": "valor com espaços"}).validate()

    def test_cabecalho_com_espaco(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_headers({"X Custom": "valor"})

        assert_code(excinfo, ValidationErrorCode.MALFORMED_HEADER)

    def test_cabecalho_reservado_na_personalizacao(self):
        email = make_email(personalizations=[
            Personalization(to=[Address("a@b.com")], headers={"Subject": "x"}),
        ])

        with pytest.raises(ValidationError) as excinfo:
            email.validate()

        assert_code(excinfo, ValidationErrorCode.HEADER_NOT_ALLOWED)


class TestCategories:

    def test_categorias_demais(self):
        with pytest.raises(ValidationError) as excinfo:
            make_email(categories=[f"c{i}" for i in range(11)]).validate()

        assert_code(excinfo, ValidationErrorCode.TOO_MANY_CATEGORIES)

    def test_categoria_longa(self):
        with pytest.raises(ValidationError) as excinfo:
            make_email(categories=["x" * 256]).validate()

        assert_code(excinfo, ValidationErrorCode.CATEGORY_TOO_LONG)

    def test_categoria_duplicada_sem_diferenciar_maiusculas(self):
        with pytest.raises(ValidationError) as excinfo:
            make_email(categories=["Notas", "notas"]).validate()

        assert_code(excinfo, ValidationErrorCode.DUPLICATE_CATEGORY)
        assert excinfo.value.value == "notas"

    def test_dez_categorias_validas(self):
        make_email(categories=[f"c{i}" for i in range(10)]).validate()


class TestCustomArgs:

    def test_personalizacao_prevalece_na_mescla(self):
        personalization = Personalization(to=[Address("a@b.com")], custom_args={"a": "2"})
        email = make_email(personalizations=[personalization], custom_args={"a": "1"})

        mesclado = email.merged_custom_args(personalization)

        assert mesclado == {"a": "2"}
        assert render_custom_args(mesclado) == b'{"a":"2"}'

    def test_tamanho_usa_o_valor_mesclado(self):
        # O valor global excede o limite, mas a personalização o substitui
        personalization = Personalization(to=[Address("a@b.com")], custom_args={"a": "2"})
        email = make_email(personalizations=[personalization], custom_args={"a": "x" * 10000})

        email.validate()

    def test_custom_args_acima_do_limite(self):
        email = make_email(custom_args={"a": "x" * 10000})

        with pytest.raises(TooManyCustomArgumentsError) as excinfo:
            email.validate()

        assert_code(excinfo, ValidationErrorCode.TOO_MANY_CUSTOM_ARGUMENTS)
        assert excinfo.value.size == len('{"a":""}') + 10000
        assert json.loads(excinfo.value.rendered) == {"a": "x" * 10000}

    def test_tamanho_em_bytes_utf8(self):
        # 5000 caracteres de 2 bytes cada
        email = make_email(custom_args={"a": "é" * 5000})

        with pytest.raises(TooManyCustomArgumentsError):
            email.validate()


class TestSchedule:

    def test_agendamento_71_horas(self):
        make_email(send_at=datetime.now(timezone.utc) + timedelta(hours=71)).validate()

    def test_agendamento_73_horas_falha(self):
        with pytest.raises(ValidationError) as excinfo:
            make_email(send_at=datetime.now(timezone.utc) + timedelta(hours=73)).validate()

        assert_code(excinfo, ValidationErrorCode.INVALID_SCHEDULE_DATE)

    def test_agendamento_ingenuo_usa_horario_local(self):
        make_email(send_at=datetime.now() + timedelta(hours=71)).validate()

    def test_agendamento_da_personalizacao(self):
        personalization = Personalization(to=[Address("a@b.com")],
                                          send_at=datetime.now(timezone.utc) + timedelta(hours=73))

        with pytest.raises(ValidationError) as excinfo:
            make_email(personalizations=[personalization]).validate()

        assert_code(excinfo, ValidationErrorCode.INVALID_SCHEDULE_DATE)

    def test_referencia_de_agora_explicita(self):
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        email = make_email(send_at=now + timedelta(hours=72))

        validate_email_request(email, now=now)


class TestSettings:

    def test_grupos_de_descadastro_demais(self):
        with pytest.raises(ValidationError) as excinfo:
            make_email(asm=ASM(group_id=1, groups_to_display=list(range(26)))).validate()

        assert_code(excinfo, ValidationErrorCode.TOO_MANY_UNSUBSCRIBE_GROUPS)

    def test_vinte_e_cinco_grupos(self):
        make_email(asm=ASM(group_id=1, groups_to_display=list(range(25)))).validate()

    @pytest.mark.parametrize('threshold', [0, 11])
    def test_limiar_do_spam_checker_fora_da_faixa(self, threshold):
        settings = MailSettings(spam_check=SpamChecker(threshold=threshold))

        with pytest.raises(ValidationError) as excinfo:
            make_email(mail_settings=settings).validate()

        assert_code(excinfo, ValidationErrorCode.THRESHOLD_OUT_OF_RANGE)

    def test_bcc_malformado(self):
        settings = MailSettings(bcc=BCCSetting(email="copia"))

        with pytest.raises(ValidationError) as excinfo:
            make_email(mail_settings=settings).validate()

        assert_code(excinfo, ValidationErrorCode.MALFORMED_EMAIL_ADDRESS)

    def test_subscription_tracking_sem_marca(self):
        settings = TrackingSettings(subscription_tracking=SubscriptionTracking(
                text="Descadastre-se", html="<p><% aqui %></p>"))

        with pytest.raises(ValidationError) as excinfo:
            make_email(tracking_settings=settings).validate()

        assert_code(excinfo, ValidationErrorCode.MISSING_SUBSCRIPTION_TRACKING_TAG)

    def test_subscription_tracking_com_marca(self):
        settings = TrackingSettings(subscription_tracking=SubscriptionTracking(
                text="Descadastre-se: <% clique %>", html="<p><% aqui %></p>"))

        make_email(tracking_settings=settings).validate()


class TestPipelineOrder:

    def test_contagem_de_personalizacoes_antes_do_conteudo(self):
        email = make_email(personalizations=[], content=[])

        with pytest.raises(ValidationError) as excinfo:
            email.validate()

        assert_code(excinfo, ValidationErrorCode.INVALID_NUMBER_OF_PERSONALIZATIONS)

    def test_duplicidade_antes_do_assunto(self):
        email = make_email(subject=None, personalizations=[
            Personalization(to=[Address("a@b.com")]),
            Personalization(to=[Address("a@b.com")]),
        ])

        with pytest.raises(ValidationError) as excinfo:
            email.validate()

        assert_code(excinfo, ValidationErrorCode.DUPLICATE_RECIPIENT)

    def test_remetente_antes_dos_cabecalhos(self):
        email = make_email(from_=Address("x"), headers={"To": "y"})

        with pytest.raises(ValidationError) as excinfo:
            email.validate()

        assert_code(excinfo, ValidationErrorCode.MALFORMED_EMAIL_ADDRESS)
