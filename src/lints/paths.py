"""
Fully qualified paths of the Solana and Anchor items the lints recognize.

Matching is by exact path equality. Re-exports (`anchor_lang::prelude::*`)
are resolved to these canonical paths by the front-end.
"""

# Types
SOLANA_PROGRAM_ACCOUNT_INFO = "solana_program::account_info::AccountInfo"

ANCHOR_LANG_ACCOUNT = "anchor_lang::accounts::account::Account"
ANCHOR_LANG_ACCOUNT_LOADER = "anchor_lang::accounts::account_loader::AccountLoader"
ANCHOR_LANG_PROGRAM = "anchor_lang::accounts::program::Program"
ANCHOR_LANG_SIGNER = "anchor_lang::accounts::signer::Signer"
ANCHOR_LANG_SYSTEM_ACCOUNT = "anchor_lang::accounts::system_account::SystemAccount"
ANCHOR_LANG_SYSVAR = "anchor_lang::accounts::sysvar::Sysvar"
ANCHOR_LANG_CONTEXT = "anchor_lang::context::Context"

# Methods
ANCHOR_LANG_KEY = "anchor_lang::Key::key"
ANCHOR_LANG_TO_ACCOUNT_INFO = "anchor_lang::ToAccountInfo::to_account_info"
CORE_CLONE = "core::clone::Clone::clone"
