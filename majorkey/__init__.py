import json
import logging
import os
import sys
from typing import Any, Dict, Optional

from flask import Flask, jsonify

from majorkey.infra import app_logging
from majorkey.infra.modulos import db
from majorkey.services.email_service import EmailService, EmailValidationService
from majorkey.services.note_service import DEFAULT_SUBJECT_PREFIX


def create_app(config_filename: Optional[str] = 'config.dev.json',
               config_overrides: Optional[Dict[str, Any]] = None) -> Flask:
    """Cria e configura a aplicação de captura de notas.

    A configuração é aplicada em camadas: arquivo JSON na pasta ``instance``, arquivo
    ``instance/.env`` (segredos), variáveis de ambiente e, por último,
    ``config_overrides``.

    Args:
        config_filename (typing.Optional[str]): Arquivo JSON na pasta ``instance``. None
            dispensa o arquivo (usado nos testes).
        config_overrides (typing.Optional[typing.Dict[str, typing.Any]]): Valores aplicados
            por último.

    Returns:
        Flask: Aplicação configurada.
    """
    from dotenv import load_dotenv
    app = Flask(__name__, instance_relative_config=True)

    try:
        os.makedirs(app.instance_path)
    except OSError:
        pass

    app_logging.configure_logging(logging.DEBUG)

    # 1. Carregar JSON base
    if config_filename is not None:
        app.logger.info(
                "Lendo a configuração da aplicação a partir do arquivo '%s'" % (config_filename,))
        try:
            app.config.from_file(config_filename, load=json.load)
        except FileNotFoundError:
            app.logger.fatal("O arquivo de configuração '%s' não existe" % (config_filename,))
            sys.exit(1)
        except json.JSONDecodeError as e:
            app.logger.fatal(
                    "O arquivo de configuração '%s' não é um JSON válido: %s" % (config_filename,
                                                                                 str(e),))
            sys.exit(1)

    # 2. Carregar .env se existir (procura em instance/)
    env_file = os.path.join(app.instance_path, '.env')
    if os.path.exists(env_file):
        load_dotenv(env_file, override=True)
        app.logger.info("Arquivo '%s' carregado" % (env_file,))
    else:
        app.logger.debug("Arquivo '%s' não encontrado" % (env_file,))

    # 3. Sobrescrever com variáveis de ambiente
    for key in list(app.config.keys()):
        if key in os.environ:
            app.config[key] = os.environ[key]
            app.logger.debug(f"  - Configuração sobrescrita: {key}")
    for key in ('SENDGRID_API_KEY', 'MAILJET_API_KEY', 'MAILJET_API_SECRET'):
        if key not in app.config and key in os.environ:
            app.config[key] = os.environ[key]

    # 4. Valores explícitos (testes)
    if config_overrides:
        app.config.update(config_overrides)

    app.logger.debug("Aplicando configurações")
    if "SQLALCHEMY_DATABASE_URI" not in app.config:
        database = os.path.join(app.instance_path, 'majorkey.sqlite')
        app.logger.warning("A chave 'SQLALCHEMY_DATABASE_URI' não está presente na "
                           "configuração. Utilizando '%s'" % (database,))
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{database}"

    if not isinstance(app.config.get("APP_HOST"), str) or app.config.get("APP_HOST") == "":
        app.logger.warning("A chave 'APP_HOST' não está presente na configuração. "
                           "Utilizando 0.0.0.0")
        app.config["APP_HOST"] = "0.0.0.0"

    try:
        app.config["APP_PORT"] = int(app.config.get("APP_PORT"))
    except (TypeError, ValueError):
        app.config["APP_PORT"] = None
    if app.config["APP_PORT"] is None or not (0 < app.config["APP_PORT"] < 65536):
        app.logger.warning("A chave 'APP_PORT' não está presente na configuração. "
                           "Utilizando 5000")
        app.config["APP_PORT"] = 5000

    app.config.setdefault("NOTES_SUBJECT_PREFIX", DEFAULT_SUBJECT_PREFIX)
    if not app.config.get("NOTES_RECIPIENT"):
        app.logger.warning("A chave 'NOTES_RECIPIENT' não está presente na configuração. "
                           "As notas serão enviadas para EMAIL_SENDER")
        app.config["NOTES_RECIPIENT"] = app.config.get("EMAIL_SENDER")
    if not EmailValidationService.is_valid(app.config.get("NOTES_RECIPIENT")):
        app.logger.warning("O destinatário das notas '%s' não é um email válido; defina-o com "
                           "'flask notes recipient'" % (app.config.get("NOTES_RECIPIENT"),))

    app.logger.debug("Registrando blueprints")
    from .routes.api import api_bp
    app.register_blueprint(api_bp)
    for rule in app.url_map.iter_rules():
        app.logger.debug("Endpoint: %s, Rule: %s" % (rule.endpoint, rule))

    app.logger.debug("Registrando modulos")
    db.init_app(app)
    with app.app_context():
        db.create_all()

    app.logger.debug("Configurando as extensões da aplicação")
    try:
        app.extensions['email_service'] = EmailService.create_from_config(app.config)
    except ValueError as e:
        app.logger.fatal("Não foi possível configurar o serviço de email: %s" % (str(e),))
        sys.exit(1)
    app.logger.info("Serviço de email: %s" %
                    (app.extensions['email_service'].get_provider_info()['provider_name'],))

    app.logger.debug("Registrando comandos CLI")
    from majorkey.cli.notes_cli import notes_cli
    app.cli.add_command(notes_cli)

    @app.errorhandler(404)
    def not_found_error(error):
        from flask import request
        app.logger.warning(f"Página não encontrada: {request.path}")
        return jsonify({'message': "Recurso não encontrado."}), 404

    @app.errorhandler(500)
    def internal_server_error(error):
        from flask import request
        app.logger.error(f"Erro interno do servidor: {error}", exc_info=True)
        app.logger.error(f"  URL: {request.path}")
        app.logger.error(f"  Método: {request.method}")
        return jsonify({'message': "Ocorreu um erro interno no servidor."}), 500

    app.logger.info("Aplicação configurada com sucesso")
    return app
