"""Codificação do corpo de envio de mensagens (JSON ou multipart/form-data).

Responsabilidades:
- Sem anexos: documento JSON único
- Com anexos: parte `payload_json` seguida de uma parte por arquivo, em ordem
- Boundary exclusivo por chamada (canal + tempo em ns) e ausente dos dados
- Ler cada stream uma única vez, sem fechar nem reposicionar

Funções puras (sem I/O de rede); podem ser chamadas de qualquer contexto.
"""

from __future__ import annotations

import io
import json
import mimetypes
import threading
import time
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any, BinaryIO, TypeAlias

from guildwire.adapters.discord.errors import StreamReadError
from guildwire.adapters.discord.models import AllowedMentions, OutboundMessageRequest
from guildwire.adapters.discord.payload_builders.factory import build_full_payload

DEFAULT_CONTENT_TYPE = "application/octet-stream"
JSON_CONTENT_TYPE = "application/json"
CRLF = b"\r\n"

_stamp_lock = threading.Lock()
_last_stamp = 0


class BodyKind(StrEnum):
    JSON = "json"
    MULTIPART = "multipart"


@dataclass(slots=True)
class Attachment:
    """Arquivo a enviar junto da mensagem.

    O stream pertence ao chamador; o encoder apenas o lê uma vez.
    """

    filename: str
    stream: BinaryIO
    content_type: str | None = None

    def __post_init__(self) -> None:
        if not self.content_type:
            guessed, _ = mimetypes.guess_type(self.filename)
            self.content_type = guessed or DEFAULT_CONTENT_TYPE

    @classmethod
    def from_bytes(cls, filename: str, data: bytes, content_type: str | None = None) -> Attachment:
        return cls(filename=filename, stream=io.BytesIO(data), content_type=content_type)

    @classmethod
    def from_path(cls, path: str | Path, content_type: str | None = None) -> Attachment:
        """Carrega o arquivo em memória (nenhum handle fica aberto)."""
        file_path = Path(path)
        return cls.from_bytes(file_path.name, file_path.read_bytes(), content_type)


@dataclass(frozen=True, slots=True)
class JsonBody:
    """Corpo JSON único."""

    data: bytes
    kind: BodyKind = field(default=BodyKind.JSON, init=False)

    @property
    def content_type(self) -> str:
        return JSON_CONTENT_TYPE

    def render(self) -> bytes:
        return self.data


@dataclass(frozen=True, slots=True)
class MultipartPart:
    """Seção nomeada do corpo multipart."""

    name: str
    headers: tuple[tuple[str, str], ...]
    data: bytes
    filename: str | None = None


@dataclass(frozen=True, slots=True)
class MultipartBody:
    """Corpo multipart/form-data com boundary exclusivo."""

    boundary: str
    parts: tuple[MultipartPart, ...]
    kind: BodyKind = field(default=BodyKind.MULTIPART, init=False)

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    def render(self) -> bytes:
        """Serializa conforme RFC 7578 (delimitadores CRLF)."""
        delimiter = f"--{self.boundary}".encode("ascii")
        out = bytearray()
        for part in self.parts:
            out += delimiter + CRLF
            for name, value in part.headers:
                out += f"{name}: {value}".encode() + CRLF
            out += CRLF + part.data + CRLF
        out += delimiter + b"--" + CRLF
        return bytes(out)


EncodedBody: TypeAlias = JsonBody | MultipartBody


def _serialize_json(payload: dict[str, Any]) -> bytes:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def _next_stamp() -> int:
    """Carimbo em ns estritamente crescente dentro do processo."""
    global _last_stamp
    with _stamp_lock:
        stamp = max(time.time_ns(), _last_stamp + 1)
        _last_stamp = stamp
        return stamp


def _quote_filename(filename: str) -> str:
    return filename.replace("\r", "").replace("\n", "").replace('"', "%22")


def _read_attachment(index: int, attachment: Attachment) -> bytes:
    """Lê o stream inteiro uma única vez."""
    try:
        data = attachment.stream.read()
    except Exception as exc:
        raise StreamReadError(index, type(exc).__name__) from exc
    if not isinstance(data, bytes | bytearray | memoryview):
        raise StreamReadError(index, f"stream retornou {type(data).__name__}, esperado bytes")
    return bytes(data)


def _collides(boundary: str, parts: list[MultipartPart]) -> bool:
    token = boundary.encode("ascii")
    for part in parts:
        if token in part.data:
            return True
        if any(boundary in value for _, value in part.headers):
            return True
    return False


def generate_boundary(channel_id: str | int) -> str:
    """Gera boundary derivado do canal e do tempo de alta resolução."""
    return f"GuildwireChannels{channel_id}MessagesPost{_next_stamp()}"


def encode_body(
    payload: dict[str, Any],
    attachments: list[Attachment] | tuple[Attachment, ...] = (),
    *,
    channel_id: str | int = "",
    file_field: str = "file",
) -> EncodedBody:
    """Codifica o payload (e anexos) no corpo da requisição.

    Args:
        payload: Documento JSON da mensagem
        attachments: Anexos em ordem de envio
        channel_id: Canal de destino (compõe o boundary)
        file_field: Nome do campo de formulário dos arquivos

    Returns:
        JsonBody sem anexos; MultipartBody com len(attachments) + 1 partes

    Raises:
        StreamReadError: Se algum anexo não puder ser lido por inteiro
    """
    document = _serialize_json(payload)
    if not attachments:
        return JsonBody(document)

    parts: list[MultipartPart] = [
        MultipartPart(
            name="payload_json",
            headers=(
                ("Content-Disposition", 'form-data; name="payload_json"'),
                ("Content-Type", JSON_CONTENT_TYPE),
            ),
            data=document,
        )
    ]
    for index, attachment in enumerate(attachments):
        data = _read_attachment(index, attachment)
        filename = _quote_filename(attachment.filename)
        parts.append(
            MultipartPart(
                name=file_field,
                headers=(
                    (
                        "Content-Disposition",
                        f'form-data; name="{file_field}"; filename="{filename}"',
                    ),
                    ("Content-Type", attachment.content_type or DEFAULT_CONTENT_TYPE),
                ),
                data=data,
                filename=filename,
            )
        )

    boundary = generate_boundary(channel_id)
    while _collides(boundary, parts):
        boundary = generate_boundary(channel_id)
    return MultipartBody(boundary=boundary, parts=tuple(parts))


def encode_message(
    request: OutboundMessageRequest,
    attachments: list[Attachment] | tuple[Attachment, ...] = (),
    *,
    channel_id: str | int = "",
    default_allowed_mentions: AllowedMentions | None = None,
) -> EncodedBody:
    """Monta o payload da mensagem e codifica o corpo."""
    payload = build_full_payload(request, default_allowed_mentions)
    return encode_body(payload, attachments, channel_id=channel_id)
