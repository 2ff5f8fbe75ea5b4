from flask import Blueprint, current_app, jsonify, request

from redlight.services.game import DIFFICULTY, round_label
from redlight.services.qr import join_url, make_qr_data_url

main = Blueprint('main', __name__)


def _session():
    return current_app.extensions['redlight']


@main.route('/')
def index():
    return jsonify({'message': 'Red Light, Green Light game server'})


@main.route('/qr')
def join_qr():
    scheme = request.headers.get('X-Forwarded-Proto') or request.scheme
    host = request.headers.get('X-Forwarded-Host') or request.host
    url = join_url(scheme, host, current_app.config['PLAYER_PAGE'])
    cfg = current_app.config
    try:
        qr = make_qr_data_url(
            url,
            box_size=cfg['QR_BOX_SIZE'],
            border=cfg['QR_BORDER'],
            dark=cfg['QR_DARK_COLOR'],
            light=cfg['QR_LIGHT_COLOR'],
        )
    except Exception as exc:
        current_app.logger.warning(f"[qr-failed] url={url} error={exc}")
        return jsonify({'error': 'QR generation failed'}), 500
    return jsonify({'qr': qr, 'url': url})


@main.route('/api/state')
def get_state():
    session = _session()
    with session.lock:
        state = session.game_state().payload()
        state['roundHistory'] = list(session.round_history)
    return jsonify(state)


@main.route('/api/difficulty')
def get_difficulty():
    return jsonify([
        dict(profile.to_dict(), round=idx, label=round_label(idx))
        for idx, profile in enumerate(DIFFICULTY, start=1)
    ])
