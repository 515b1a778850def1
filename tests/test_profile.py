import os

import pytest
from wishboat.config import Config
from wishboat.storagehub import StorageHub
from wishboat.usrsys.profile import ProfileManager, UploadedFile
from wishboat.usrsys.usr import ProfilePicture


@pytest.fixture
def upload_dir(tmp_path):
    return str(tmp_path / "uploads")


@pytest.fixture
def profile_manager(storage_hub: StorageHub, upload_dir) -> ProfileManager:
    return ProfileManager(
        storage_hub.user_records,
        Config(upload_dir=upload_dir, pfp_upload_max_size=0.01),
    )


@pytest.fixture
async def alice(storage_hub: StorageHub):
    return await storage_hub.user_records.create_new_user("alice", "alicepassword")


def png(size: int = 64, filename: str = "me.png") -> UploadedFile:
    return UploadedFile(filename=filename, content_type="image/png", body=b"\0" * size)


class TestProfileInfo:
    async def test_only_known_keys_are_saved(
        self, storage_hub: StorageHub, profile_manager: ProfileManager, alice
    ):
        answer = await profile_manager.update_info(
            alice, {"shoeSize": "38", "hatSize": "M", "password_b64hash": "x"}
        )
        assert answer.success
        assert answer.message == "PROFILE_UPDATE_INFO_SUCCESS"
        saved = await storage_hub.user_records.get("alice")
        assert saved and saved.info == {"shoeSize": "38", "hatSize": "M"}
        assert saved.password_b64hash != "x"


class TestProfilePassword:
    @pytest.mark.parametrize(
        "old,new,message",
        [
            ("", "new", "PROFILE_PASSWORD_REQUIRED_OLD"),
            ("alicepassword", "", "PROFILE_PASSWORD_REQUIRED_NEW"),
            ("wrong", "new", "PROFILE_PASSWORD_OLD_MISMATCH"),
        ],
    )
    async def test_refused_changes(
        self, storage_hub: StorageHub, profile_manager, alice, old, new, message
    ):
        answer = await profile_manager.change_password(alice, old, new)
        assert not answer.success
        assert answer.message == message
        assert await storage_hub.user_records.check_user_password(
            "alice", "alicepassword"
        )

    async def test_password_is_changed(
        self, storage_hub: StorageHub, profile_manager: ProfileManager, alice
    ):
        answer = await profile_manager.change_password(
            alice, "alicepassword", "newpassword"
        )
        assert answer.success
        users = storage_hub.user_records
        assert await users.check_user_password("alice", "newpassword")
        assert not await users.check_user_password("alice", "alicepassword")

    async def test_user_removed_during_the_change(
        self,
        storage_hub: StorageHub,
        profile_manager: ProfileManager,
        alice,
        monkeypatch,
    ):
        users = profile_manager.user_record_storage

        async def check_then_remove(user_id: str, password: str) -> bool:
            await users.remove({"identity": user_id})
            return True

        monkeypatch.setattr(users, "check_user_password", check_then_remove)
        answer = await profile_manager.change_password(
            alice, "alicepassword", "newpassword"
        )
        assert not answer.success
        assert answer.message == "PROFILE_USER_NOT_FOUND"
        assert await users.get("alice") is None


class TestProfilePicture:
    async def test_missing_file(self, profile_manager: ProfileManager, alice):
        answer = await profile_manager.upload_pfp(alice, None)
        assert answer.message == "PROFILE_PFP_UPLOAD_NO_FILE"

    @pytest.mark.parametrize(
        "upload",
        [
            UploadedFile("me.gif", "image/gif", b"GIF89a"),
            UploadedFile("me.png", "text/plain", b"hello"),
            UploadedFile("me.txt", "image/png", b"hello"),
        ],
    )
    async def test_file_type_is_checked(
        self, profile_manager: ProfileManager, alice, upload
    ):
        answer = await profile_manager.upload_pfp(alice, upload)
        assert answer.message == "PROFILE_PFP_UPLOAD_FILE_TYPE"
        assert alice.pfp is None

    async def test_file_size_is_checked(self, profile_manager: ProfileManager, alice):
        answer = await profile_manager.upload_pfp(alice, png(size=1024 * 1024))
        assert answer.message == "PROFILE_PFP_UPLOAD_FILE_SIZE"

    async def test_picture_is_saved_and_old_one_removed(
        self, storage_hub: StorageHub, profile_manager: ProfileManager, alice, upload_dir
    ):
        first = await profile_manager.upload_pfp(alice, png())
        assert first.success
        assert first.message == "PROFILE_PFP_UPLOAD_SUCCESS"
        assert alice.pfp
        old_path = profile_manager.pfp_path(alice.pfp)
        assert os.path.isfile(old_path)

        second = await profile_manager.upload_pfp(
            alice, UploadedFile("me.JPG", "image/jpeg", b"\xff\xd8")
        )
        assert second.success
        assert alice.pfp.file.endswith(".jpg")
        assert not os.path.exists(old_path)
        assert os.listdir(upload_dir) == [alice.pfp.file]
        saved = await storage_hub.user_records.get("alice")
        assert saved and saved.pfp == alice.pfp

    async def test_missing_picture_file_is_dropped(
        self, storage_hub: StorageHub, profile_manager: ProfileManager, alice
    ):
        alice.pfp = ProfilePicture(file="gone.png")
        await storage_hub.user_records.put(alice)
        user = await profile_manager.ensure_pfp("alice")
        assert user and user.pfp is None
        saved = await storage_hub.user_records.get("alice")
        assert saved and saved.pfp is None

    async def test_existing_picture_is_kept(
        self, profile_manager: ProfileManager, alice
    ):
        await profile_manager.upload_pfp(alice, png())
        user = await profile_manager.ensure_pfp("alice")
        assert user and user.pfp == alice.pfp
