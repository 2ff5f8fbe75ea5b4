import base64
import io

import qrcode


def join_url(scheme: str, host: str, page: str) -> str:
    return f"{scheme}://{host}{page}"


def make_qr_data_url(data: str, box_size: int = 10, border: int = 2,
                     dark: str = '#1a1a2e', light: str = '#ffffff') -> str:
    """Render ``data`` as a PNG QR code wrapped in a data URL."""
    qr = qrcode.QRCode(box_size=box_size, border=border)
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color=dark, back_color=light)
    buffer = io.BytesIO()
    img.save(buffer, format='PNG')
    encoded = base64.b64encode(buffer.getvalue()).decode('ascii')
    return f"data:image/png;base64,{encoded}"
