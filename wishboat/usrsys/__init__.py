# Copyright (C) 2026 The Wishboat Contributors
#
# This file is part of Wishboat.
#
# Wishboat is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# Wishboat is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with Wishboat.  If not, see <http://www.gnu.org/licenses/>.

"""The user system for Wishboat.

User system process all the things about users:

- Users and their documents (`usr`, `storage`)
- Authentication and session tokens (`auth`, `tk`)
- Profile: sizing info, password and profile picture (`profile`)

## One user, one document
`usr.UserRecord` is stored as a whole: the profile, the password hash and the wishlist are in the same document.
Saving a wishlist writes the user document, see `wishboat.wishlist`.
"""
