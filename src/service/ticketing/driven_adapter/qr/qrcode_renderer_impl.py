from pathlib import Path

import anyio.to_thread
import qrcode
from qrcode.exceptions import DataOverflowError

from src.platform.exception.exceptions import RenderError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_qr_code_renderer import IQrCodeRenderer


class QrCodeRenderer(IQrCodeRenderer):
    """
    Writes one PNG per ticket code under `<upload_dir>/<subdir>/`.

    The returned path is relative to the upload root, which the app serves at /uploads.
    """

    def __init__(self, *, upload_dir: str, subdir: str = 'qrcodes') -> None:
        self.upload_dir = Path(upload_dir)
        self.subdir = subdir

    @Logger.io
    async def render(self, *, code: str) -> str:
        relative_path = f'{self.subdir}/{code}.png'
        target = self.upload_dir / relative_path
        try:
            # qrcode and PIL are blocking
            await anyio.to_thread.run_sync(self._write_png, code, target)
        except (OSError, ValueError, DataOverflowError) as e:
            raise RenderError(f'Failed to render QR code for {code}: {e}') from e

        Logger.base.info(f'🔳 [QR] Rendered {relative_path}')
        return relative_path

    @staticmethod
    def _write_png(data: str, target: Path) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        qr = qrcode.QRCode(version=1, box_size=10, border=5)
        qr.add_data(data)
        qr.make(fit=True)
        img = qr.make_image(fill_color='black', back_color='white')
        img.save(str(target))
