"""`ProfileManager`: what users change on their own profile, sizing info, password and profile picture.

Mistakes of users are not errors here, every operation answers a `ProfileAnswer` with the key of the message to show (see `wishboat.lang`).
"""
import logging
import os
import os.path
import re
import time
from asyncio import get_running_loop
from dataclasses import dataclass
from typing import Mapping, Optional
from uuid import uuid4

from ..config import Config
from ..utils import global_executor
from ..utils.asec import password_hashing
from .storage import UserRecordStorage
from .usr import INFO_KEYS, ProfilePicture, UserRecord

PFP_ALLOWED_TYPES = re.compile(r"png|jpg|jpeg")
"""Both the file extension and the MIME type of profile pictures should match it."""


@dataclass
class ProfileAnswer(object):
    """The answer of profile operations.

    Attributes:
        success: `bool`.
        message: `str`. The message key.
    """

    success: bool
    message: str


@dataclass
class UploadedFile(object):
    """A file from a form.

    Attributes:
        filename: `str`. The name given by the client.
        content_type: `str`. The MIME type given by the client.
        body: `bytes`.
    """

    filename: str
    content_type: str
    body: bytes

    @property
    def size(self) -> int:
        return len(self.body)


def _write_file(path: str, body: bytes) -> None:
    with open(path, "wb") as f:
        f.write(body)


def _remove_file(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass


class ProfileManager(object):
    __logger = logging.getLogger("wishboat.usrsys.ProfileManager")

    def __init__(self, user_record_storage: UserRecordStorage, config: Config) -> None:
        self.user_record_storage = user_record_storage
        self.config = config
        super().__init__()

    @property
    def upload_dir(self) -> str:
        return self.config.upload_dir

    def pfp_path(self, pfp: ProfilePicture) -> str:
        return os.path.join(self.upload_dir, os.path.basename(pfp.file))

    async def update_info(
        self, user: UserRecord, form: Mapping[str, str]
    ) -> ProfileAnswer:
        """Copy the entries of `form` with keys in `INFO_KEYS` into `user.info`, then save the user."""
        for k, v in form.items():
            self.__logger.debug("info of %s: %s=%r", user.identity, k, v)
            if k not in INFO_KEYS:
                continue
            user.info[k] = v
        await self.user_record_storage.put(user)
        return ProfileAnswer(True, "PROFILE_UPDATE_INFO_SUCCESS")

    async def change_password(
        self, user: UserRecord, old_password: str, new_password: str
    ) -> ProfileAnswer:
        if not old_password:
            return ProfileAnswer(False, "PROFILE_PASSWORD_REQUIRED_OLD")
        if not new_password:
            return ProfileAnswer(False, "PROFILE_PASSWORD_REQUIRED_NEW")
        if not await self.user_record_storage.check_user_password(
            user.identity, old_password
        ):
            return ProfileAnswer(False, "PROFILE_PASSWORD_OLD_MISMATCH")
        password_hash = await password_hashing(new_password)
        # the document may have changed since the request began
        doc = await self.user_record_storage.get(user.identity)
        if not doc:
            return ProfileAnswer(False, "PROFILE_USER_NOT_FOUND")
        doc.password_b64hash = password_hash
        await self.user_record_storage.put(doc)
        user.password_b64hash = password_hash
        return ProfileAnswer(True, "PROFILE_PASSWORD_SUCCESS")

    async def upload_pfp(
        self, user: UserRecord, upload: Optional[UploadedFile]
    ) -> ProfileAnswer:
        """Check and save `upload` as the profile picture of `user`. The old picture file is removed."""
        if not upload:
            return ProfileAnswer(False, "PROFILE_PFP_UPLOAD_NO_FILE")
        ext = os.path.splitext(upload.filename)[1].lower()
        if not (
            PFP_ALLOWED_TYPES.search(ext)
            and PFP_ALLOWED_TYPES.search(upload.content_type or "")
        ):
            return ProfileAnswer(False, "PROFILE_PFP_UPLOAD_FILE_TYPE")
        if upload.size > self.config.pfp_upload_max_bytes:
            return ProfileAnswer(False, "PROFILE_PFP_UPLOAD_FILE_SIZE")

        old_pfp = user.pfp
        file_name = "{}-{}{}".format(int(time.time() * 1000), uuid4().hex[:8], ext)
        loop = get_running_loop()
        try:
            os.makedirs(self.upload_dir, exist_ok=True)
            await loop.run_in_executor(
                global_executor.get(),
                _write_file,
                os.path.join(self.upload_dir, file_name),
                upload.body,
            )
            user.pfp = ProfilePicture(file=file_name)
            await self.user_record_storage.put(user)
            answer = ProfileAnswer(True, "PROFILE_PFP_UPLOAD_SUCCESS")
        except Exception:
            self.__logger.exception(
                "could not save profile picture of %s", user.identity
            )
            user.pfp = old_pfp
            answer = ProfileAnswer(False, "PROFILE_PFP_UPLOAD_ERROR")

        if answer.success and old_pfp:
            await loop.run_in_executor(
                global_executor.get(), _remove_file, self.pfp_path(old_pfp)
            )
        return answer

    async def ensure_pfp(self, user_id: str) -> Optional[UserRecord]:
        """Drop the profile picture reference of the user if the file is gone. Return the user, `None` if not found."""
        user = await self.user_record_storage.get(user_id)
        if user and user.pfp and not os.path.isfile(self.pfp_path(user.pfp)):
            self.__logger.info(
                "profile picture %s of %s is missing", user.pfp.file, user_id
            )
            user.pfp = None
            await self.user_record_storage.put(user)
        return user
