"""
Use Cases Layer (Business Operations)

Structure
---------
usecases/
├── identity/   # identity projection resolution (login / who-am-i)
└── profile/    # profile visibility, masking and updates

Usage
-----
    from account_access.application.usecases.profile import GetVisibleProfileUseCase
    from account_access.application.usecases.identity import ResolveIdentityUseCase
"""
