import click
from flask.cli import with_appcontext

from majorkey.services.note_service import NoteService
from majorkey.services.settings_service import SettingsService


@click.group('notes')
def notes_cli():
    """Captura e histórico de notas."""
    pass


@notes_cli.command('send')
@click.argument('text')
@with_appcontext
def cmd_send(text):
    """Registra a nota TEXT no histórico e a envia por email."""
    resultado = NoteService.submit(text)
    if not resultado.ok:
        raise click.ClickException(resultado.message)
    click.echo(f"[OK] Nota {resultado.note.id} enviada via {resultado.note.provider} "
               f"(ID: {resultado.note.message_id or 'N/A'})")


@notes_cli.command('history')
@click.option('--limit', default=20, type=click.IntRange(min=1), show_default=True,
              help='Número máximo de notas exibidas')
@with_appcontext
def cmd_history(limit):
    """Lista as notas mais recentes primeiro."""
    notas = NoteService.history(limit)
    if not notas:
        click.echo("Nenhuma nota registrada.")
        return

    click.echo(f"{'ID':<5} {'Enviada':<8} {'Criada em':<20} Texto")
    click.echo("-" * 80)
    for nota in notas:
        criada = nota.created_at.strftime("%Y-%m-%d %H:%M:%S") if nota.created_at else "N/A"
        texto = nota.text.replace('\n', ' ')
        if len(texto) > 45:
            texto = texto[:42] + "..."
        click.echo(f"{nota.id:<5} {'sim' if nota.sent else 'não':<8} {criada:<20} {texto}")


@notes_cli.command('recipient')
@click.argument('email', required=False)
@with_appcontext
def cmd_recipient(email):
    """Mostra o destinatário das notas ou o altera para EMAIL."""
    if email is None:
        click.echo(SettingsService.get_recipient() or "Nenhum destinatário configurado.")
        return
    try:
        normalizado = SettingsService.set_recipient(email)
    except ValueError as e:
        raise click.ClickException(str(e))
    click.echo(f"[OK] Notas serão enviadas para {normalizado}")
