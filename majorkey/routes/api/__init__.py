from flask import Blueprint, current_app, jsonify, request

from majorkey.services.note_service import NoteOperationResult, NoteService
from majorkey.services.settings_service import SettingsService

api_bp = Blueprint(name='api',
                   import_name=__name__,
                   url_prefix='/api')

HISTORY_MAX_LIMIT = 100

_STATUS_HTTP = {
    NoteOperationResult.SENT            : 201,
    NoteOperationResult.VALIDATION_ERROR: 400,
    NoteOperationResult.SEND_ERROR      : 502,
    NoteOperationResult.DATABASE_ERROR  : 500,
}


@api_bp.route('/notes', methods=['POST'])
def submit_note():
    """Registra uma nota e a envia por email.

    Body (JSON):
        - text: Texto da nota

    Returns:
        JSON com status, mensagem e a nota registrada. 201 se enviada, 400 para texto
        vazio e 502 se o provedor de email falhar (a nota fica no histórico como não enviada).
    """
    dados = request.get_json(silent=True) or {}
    text = dados.get('text')
    if text is not None and not isinstance(text, str):
        return jsonify({'status' : NoteOperationResult.VALIDATION_ERROR.value,
                        'message': "O campo 'text' deve ser uma string."}), 400

    resultado = NoteService.submit(text)
    corpo = {
        'status' : resultado.status.value,
        'message': resultado.message,
        'note'   : resultado.note.to_dict() if resultado.note else None,
    }
    return jsonify(corpo), _STATUS_HTTP[resultado.status]


@api_bp.route('/notes', methods=['GET'])
def list_notes():
    """Histórico de notas, mais recentes primeiro.

    Query Parameters:
        - limit: Número máximo de notas (default: 20, max: 100)
    """
    try:
        limit = int(request.args.get('limit', 20))
    except ValueError:
        return jsonify({'message': "O parâmetro 'limit' deve ser um número inteiro."}), 400
    if limit < 1:
        return jsonify({'message': "O parâmetro 'limit' deve ser positivo."}), 400
    limit = min(limit, HISTORY_MAX_LIMIT)

    notas = NoteService.history(limit)
    current_app.logger.debug("Histórico consultado: %d notas" % (len(notas),))
    return jsonify([nota.to_dict() for nota in notas])


@api_bp.route('/settings/recipient', methods=['GET'])
def get_recipient():
    return jsonify({'email': SettingsService.get_recipient()})


@api_bp.route('/settings/recipient', methods=['PUT'])
def set_recipient():
    """Altera o endereço que recebe as notas.

    Body (JSON):
        - email: Novo destinatário

    Returns:
        JSON com o endereço normalizado, ou 400 se o email for inválido.
    """
    dados = request.get_json(silent=True) or {}
    try:
        email = SettingsService.set_recipient(dados.get('email'))
    except ValueError as e:
        return jsonify({'message': str(e)}), 400
    return jsonify({'email': email})
