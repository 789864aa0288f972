# recorder/folders.py — dossiers et fichiers : Cloudinary pour le stockage, la base pour l'arborescence
from __future__ import annotations
import io
import logging
from typing import Optional

import cloudinary
import cloudinary.api
import cloudinary.uploader

from models import Folder, MediaFile
from recorder.config import RecorderConfig
from recorder.errors import InvalidArgument, StorageError

logger = logging.getLogger(__name__)


def configure_cloudinary(cloud_name: Optional[str], api_key: Optional[str],
                         api_secret: Optional[str]) -> None:
    cloudinary.config(
        cloud_name=cloud_name,
        api_key=api_key,
        api_secret=api_secret,
        secure=True,
    )


class FolderStore:
    """Lookup-or-create folders by name and write files into them."""

    def __init__(self, session, config: RecorderConfig):
        self.session = session
        self.config = config

    # ─── Dossiers ───────────────────────────────────────────────────────────
    def _remote_path(self, name: str, parent: Optional[Folder]) -> str:
        if parent is not None:
            return f"{parent.cloud_path}/{name}"
        return f"{self.config.cloud_root}/{name}" if self.config.cloud_root else name

    def resolve(self, name, parent: Optional[Folder] = None) -> Folder:
        if not isinstance(name, str) or not name.strip():
            raise InvalidArgument("有効なフォルダ名が指定されていません。")

        parent_id = parent.id if parent is not None else None
        # premier dossier trouvé = celui retenu, les doublons ne sont pas fusionnés
        found = (Folder.query.filter(Folder.name == name, Folder.parent_id == parent_id)
                 .order_by(Folder.id.asc()).first())
        if found:
            return found

        path = self._remote_path(name, parent)
        try:
            cloudinary.api.create_folder(path)
            folder = Folder(name=name, parent_id=parent_id, cloud_path=path)
            self.session.add(folder)
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            logger.error('Folder "%s" could not be created: %s', name, e)
            raise StorageError(f'フォルダ "{name}" の作成に失敗しました。') from e
        logger.info('Folder "%s" (id=%s) created', name, folder.id)
        return folder

    def resolve_id(self, name, parent: Optional[Folder] = None) -> int:
        return self.resolve(name, parent).id

    def folder_url(self, folder: Folder) -> str:
        return f"{self.config.public_base_url}/api/folders/{folder.id}"

    @staticmethod
    def display_path(parent: Folder, target: Folder) -> str:
        if target.id == parent.id:
            return parent.name
        return f"{parent.name} > {target.name}"

    # ─── Fichiers ───────────────────────────────────────────────────────────
    def write_file(self, folder: Folder, file_name: str, mime_type: str, data: bytes,
                   media_type: str, resource_type: str = "auto") -> MediaFile:
        stream = io.BytesIO(data)
        stream.name = file_name
        try:
            res = cloudinary.uploader.upload(
                stream,
                folder=folder.cloud_path,
                resource_type=resource_type,
                use_filename=True,
                unique_filename=True,
                filename_override=file_name,
                overwrite=False,
            )
            media = MediaFile(name=file_name, mime_type=mime_type, size=len(data),
                              media_type=media_type, public_id=res["public_id"],
                              url=res["secure_url"], folder_id=folder.id)
            self.session.add(media)
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            logger.error('Upload of "%s" to "%s" failed: %s', file_name, folder.cloud_path, e)
            raise StorageError(f'ファイル "{file_name}" の保存に失敗しました。') from e
        return media
