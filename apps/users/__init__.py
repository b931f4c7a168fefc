"""Users app package.

Defines the custom user model with the ``user`` and ``admin`` roles,
JWT authentication endpoints and the permission classes shared by the
other apps. Use ``apps.users.models.CustomUser`` as the AUTH_USER_MODEL
throughout the project.
"""
