"""Messages shown to users: `Lang`.

Messages are looked up by key and formatted with `str.format`, `lang("PROFILE_TITLE", "alice")` gives "alice's profile".
"""
import logging
from typing import Any, Dict

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "PROFILE_TITLE": "{0}'s profile",
        "PROFILE_UPDATE_INFO_SUCCESS": "Profile info updated",
        "PROFILE_PASSWORD_TITLE": "{0}'s password",
        "PROFILE_PASSWORD_REQUIRED_OLD": "Old password is required",
        "PROFILE_PASSWORD_REQUIRED_NEW": "New password is required",
        "PROFILE_PASSWORD_OLD_MISMATCH": "Old password is incorrect",
        "PROFILE_PASSWORD_SUCCESS": "Password changed",
        "PROFILE_PFP_UPLOAD_NO_FILE": "No file was uploaded",
        "PROFILE_PFP_UPLOAD_FILE_TYPE": "Profile pictures must be PNG or JPEG images",
        "PROFILE_PFP_UPLOAD_FILE_SIZE": "The profile picture is too large",
        "PROFILE_PFP_UPLOAD_SUCCESS": "Profile picture updated",
        "PROFILE_PFP_UPLOAD_ERROR": "Could not save the profile picture",
        "PROFILE_USER_NOT_FOUND": "Your account no longer exists",
        "NAVBAR_PROFILE": "Profile",
        "NAVBAR_PLEDGES": "Pledges",
        "PLEDGE_MARKED_PURCHASED": "Marked as purchased",
        "PLEDGE_MARKED_NOT_PURCHASED": "Marked as not purchased",
        "PLEDGE_STORE_UNAVAILABLE": "Wishlists are unavailable right now",
        "PLEDGE_OWNER_NOT_FOUND": "Wishlist of {0} not found",
        "PLEDGE_ITEM_NOT_FOUND": "Item not found",
        "PLEDGE_NOT_PLEDGE_OWNER": "You did not pledge this item",
        "PLEDGE_ALREADY_PLEDGED": "Someone else already pledged this item",
        "LOGIN_TITLE": "Sign in",
        "LOGIN_FAILED": "Incorrect username or password",
    },
    "fr": {
        "PROFILE_TITLE": "Profil de {0}",
        "PROFILE_UPDATE_INFO_SUCCESS": "Informations mises à jour",
        "PROFILE_PASSWORD_TITLE": "Mot de passe de {0}",
        "PROFILE_PASSWORD_REQUIRED_OLD": "L'ancien mot de passe est requis",
        "PROFILE_PASSWORD_REQUIRED_NEW": "Le nouveau mot de passe est requis",
        "PROFILE_PASSWORD_OLD_MISMATCH": "L'ancien mot de passe est incorrect",
        "PROFILE_PASSWORD_SUCCESS": "Mot de passe modifié",
        "PROFILE_PFP_UPLOAD_NO_FILE": "Aucun fichier envoyé",
        "PROFILE_PFP_UPLOAD_FILE_TYPE": "La photo de profil doit être une image PNG ou JPEG",
        "PROFILE_PFP_UPLOAD_FILE_SIZE": "La photo de profil est trop grande",
        "PROFILE_PFP_UPLOAD_SUCCESS": "Photo de profil mise à jour",
        "PROFILE_PFP_UPLOAD_ERROR": "Impossible d'enregistrer la photo de profil",
        "PROFILE_USER_NOT_FOUND": "Votre compte n'existe plus",
        "NAVBAR_PROFILE": "Profil",
        "NAVBAR_PLEDGES": "Promesses",
        "PLEDGE_MARKED_PURCHASED": "Marqué comme acheté",
        "PLEDGE_MARKED_NOT_PURCHASED": "Marqué comme non-acheté",
        "PLEDGE_STORE_UNAVAILABLE": "Les listes sont indisponibles pour le moment",
        "PLEDGE_OWNER_NOT_FOUND": "Liste de {0} introuvable",
        "PLEDGE_ITEM_NOT_FOUND": "Article introuvable",
        "PLEDGE_NOT_PLEDGE_OWNER": "Vous n'avez pas promis cet article",
        "PLEDGE_ALREADY_PLEDGED": "Quelqu'un d'autre a déjà promis cet article",
        "LOGIN_TITLE": "Connexion",
        "LOGIN_FAILED": "Nom d'utilisateur ou mot de passe incorrect",
    },
}
"""Message tables, by language then key."""


class Lang(object):
    """Message lookup for one language. Keys missing in the language fall back to English, then to the key itself."""

    __logger = logging.getLogger("wishboat.lang.Lang")

    def __init__(self, language: str = "en") -> None:
        if language not in MESSAGES:
            self.__logger.warning("no messages for language %r, using en", language)
            language = "en"
        self.language = language
        self.messages = MESSAGES[language]
        super().__init__()

    def __call__(self, key: str, *args: Any) -> str:
        template = self.messages.get(key) or MESSAGES["en"].get(key)
        if template is None:
            return key
        return template.format(*args)
