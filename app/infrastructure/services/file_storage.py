"""Armazenamento das imagens de perfil de usuário no filesystem local."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Optional

from app.infrastructure.config import get_settings

logger = logging.getLogger(__name__)

# Assinaturas (magic bytes) → extensão canônica
_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"\xff\xd8\xff", ".jpg"),
    (b"\x89PNG\r\n\x1a\n", ".png"),
    (b"GIF87a", ".gif"),
    (b"GIF89a", ".gif"),
)

# Grafias alternativas da mesma extensão
_EXTENSION_ALIASES = {".jpeg": ".jpg"}


class FileStorageError(OSError):
    """Falha ao gravar imagem (tamanho, tipo ou disco)."""
    pass


def detect_image_extension(content: bytes) -> Optional[str]:
    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return ".webp"
    for signature, ext in _SIGNATURES:
        if content.startswith(signature):
            return ext
    return None


class UsuarioFileService:
    """Grava imagens em <UPLOAD_DIR>/usuarios com nome único."""

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        settings = get_settings()
        self._max_bytes = settings.MAX_FILE_SIZE_BYTES
        self._max_mb = settings.MAX_FILE_SIZE_MB
        self._allowed = {ext.lower() for ext in settings.ALLOWED_IMAGE_EXTENSIONS}
        self.base_dir = Path(base_dir or settings.UPLOAD_DIR) / "usuarios"
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def salvar(self, nome_imagem: str, imagem: bytes) -> str:
        """Valida e grava a imagem; retorna o nome armazenado."""
        if not imagem:
            raise FileStorageError("Imagem vazia")
        if len(imagem) > self._max_bytes:
            raise FileStorageError(f"Imagem excede o limite de {self._max_mb}MB")

        ext = Path(nome_imagem or "").suffix.lower()
        if ext and ext not in self._allowed:
            raise FileStorageError(
                f"Extensão não permitida: {ext}. Permitidas: {', '.join(sorted(self._allowed))}"
            )

        detected = detect_image_extension(imagem)
        if detected is None:
            raise FileStorageError("Conteúdo do arquivo não corresponde a uma imagem suportada")

        if ext and _EXTENSION_ALIASES.get(ext, ext) != detected:
            raise FileStorageError(
                f"Extensão {ext} não corresponde ao conteúdo da imagem ({detected})"
            )

        stored_name = f"{uuid.uuid4().hex}{detected}"
        (self.base_dir / stored_name).write_bytes(imagem)
        logger.info("Imagem %s gravada como %s (%d bytes)", nome_imagem, stored_name, len(imagem))
        return stored_name

    def obter(self, nome_imagem: str) -> Optional[Path]:
        """Path da imagem, ou None se não existir ou escapar do diretório."""
        base = self.base_dir.resolve()
        path = (base / nome_imagem).resolve()
        if base not in path.parents or not path.is_file():
            return None
        return path
