"""Create demo game state and party data for development/testing."""

import logging
import shutil

from backend import storage
from questlog.characters import (
    create_party_member,
    set_character_relationship,
    set_character_trait,
)
from questlog.models import PartyConfiguration
from questlog.party import create_party_configuration, generate_party_name, set_party_configuration
from questlog.progress import (
    add_inventory_item,
    create_initial_progress_data,
    record_choice,
    record_visited_scenario,
    update_player_stat,
)
from questlog.serialization import GameState

logger = logging.getLogger(__name__)

DEMO_SESSION_ID = "demo-session"
DEMO_STORY_ID = "dragons-hollow"


def build_demo_party() -> PartyConfiguration:
    """Barbarian, mage, and bard, with a rivalry and a couple of traits."""
    thrak = create_party_member("Thrak", "barbarian")
    elena = create_party_member("Elena", "mage", {"background": "Apprentice of the Tower"})
    pip = create_party_member("Pip", "bard")

    thrak = set_character_trait(thrak, "temper", "short", source="personality")
    pip = set_character_trait(pip, "favorite_song", "The Ballad of Fafnir", source="quirks")
    thrak = set_character_relationship(thrak, elena.id, "rivalry", 35, {"since": "the bridge"})
    elena = set_character_relationship(elena, pip.id, "friendship", 80)

    return create_party_configuration([thrak, elena, pip], formation="line")


def create_demo_data() -> GameState:
    """Wipe existing game states/parties and create fresh demo data."""
    for directory in (storage.game_states_dir(), storage.parties_dir()):
        if directory.exists():
            shutil.rmtree(directory)
        directory.mkdir(parents=True, exist_ok=True)

    party = build_demo_party()
    storage.save_party(DEMO_SESSION_ID, party, generate_party_name(party))

    progress = create_initial_progress_data(DEMO_SESSION_ID)
    progress = record_visited_scenario(progress, "village-gate")
    progress = record_choice(progress, "village-gate", "enter", "Enter the village", "village-square")
    progress = record_visited_scenario(progress, "village-square")
    progress = add_inventory_item(progress, "torch", "Torch", 2, "Burns for about an hour")
    progress = add_inventory_item(progress, "gold", "Gold Coin", 15)
    progress = update_player_stat(progress, "reputation", 3)
    progress = set_party_configuration(progress, party)

    game_state = storage.create_game_state(
        DEMO_SESSION_ID, DEMO_STORY_ID, "village-square", progress
    )
    logger.info("Created demo game state %s", game_state.id)
    return game_state
