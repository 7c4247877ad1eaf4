from abc import ABC, abstractmethod


class IQrCodeRenderer(ABC):
    @abstractmethod
    async def render(self, *, code: str) -> str:
        """
        Render a QR artifact whose payload is `code`.

        Returns:
            Artifact location relative to the upload root (e.g. 'qrcodes/TKT-....png')

        Raises:
            RenderError: On any I/O or encoding failure
        """
        pass
