from typing import Optional

from src.platform.config.core_setting import settings


def to_public_upload_url(relative_path: Optional[str]) -> Optional[str]:
    """'qrcodes/TKT-1.png' -> '<APP_BASE_URL>/uploads/qrcodes/TKT-1.png'; absolute URLs pass through"""
    if not relative_path:
        return relative_path
    if relative_path.startswith(('http://', 'https://')):
        return relative_path
    return f"{settings.APP_BASE_URL.rstrip('/')}/uploads/{relative_path.lstrip('/')}"
