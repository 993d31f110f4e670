"""File-based JSON storage for game states and saved parties.

Data layout:
  data/
    game-states/
      <id>.json                 Serialized GameState (envelope + progress data)
    parties/
      <session-key>/            Session id if file-safe, else "~" + its sha256
        <party-slug>.json       Saved standalone party (SavedParty)

Game states are written and read through questlog.serialization, so every
read heals legacy or partial progress data before the caller sees it. Saved
parties are re-migrated to the current character model on every read.

There is no locking: when two writers touch the same file, the last write
wins.

Slug rules: title → Unicode normalize → strip non-ASCII → lowercase →
replace non-alnum runs with hyphen → strip leading/trailing hyphens.
"""

# Re-export all public symbols so `from backend import storage` keeps working.

from .core import (  # noqa: F401
    data_dir,
    game_states_dir,
    init_storage,
    is_safe_id,
    parties_dir,
    slugify,
)

from .game_states import (  # noqa: F401
    create_game_state,
    delete_game_state,
    find_game_state,
    get_game_state,
    list_game_states,
    save_game_state,
    update_game_state,
)

from .parties import (  # noqa: F401
    delete_saved_party,
    get_saved_party,
    is_party_name_available,
    list_saved_parties,
    save_party,
)
