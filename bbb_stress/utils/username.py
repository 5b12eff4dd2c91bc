"""
Random display names for simulated participants.
"""

import random
from typing import Optional

ADJECTIVES = [
    "Agile", "Brave", "Calm", "Clever", "Curious", "Daring", "Eager", "Fancy",
    "Gentle", "Happy", "Jolly", "Kind", "Lively", "Lucky", "Mighty", "Nimble",
    "Polite", "Proud", "Quick", "Quiet", "Rapid", "Shy", "Silly", "Smart",
    "Sunny", "Swift", "Tidy", "Witty", "Zany", "Zesty",
]

ANIMALS = [
    "Badger", "Beaver", "Bison", "Cheetah", "Dolphin", "Eagle", "Falcon", "Ferret",
    "Gecko", "Heron", "Ibis", "Jaguar", "Koala", "Lemur", "Lynx", "Marmot",
    "Narwhal", "Ocelot", "Otter", "Panda", "Puffin", "Quokka", "Raccoon", "Salmon",
    "Tapir", "Toucan", "Walrus", "Wombat", "Yak", "Zebra",
]


def get_random(rng: Optional[random.Random] = None) -> str:
    """
    Return a random display name like ``"Brave Otter 42"``.

    Names are not guaranteed to be unique.
    """
    rng = rng or random
    return f"{rng.choice(ADJECTIVES)} {rng.choice(ANIMALS)} {rng.randint(1, 999)}"
