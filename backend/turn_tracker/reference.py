"""Static ruleset data shared by the engine and the clients."""

STRATEGY_CARDS = {
    1: 'Leadership',
    2: 'Diplomacy',
    3: 'Politics',
    4: 'Construction',
    5: 'Trade',
    6: 'Warfare',
    7: 'Technology',
    8: 'Imperial',
}

PLAYER_COLORS = ['red', 'blue', 'green', 'yellow', 'purple', 'black', 'orange', 'pink']

FACTIONS = [
    'The Arborec',
    'The Argent Flight',
    'The Barony of Letnev',
    'The Clan of Saar',
    'The Embers of Muaat',
    'The Emirates of Hacan',
    'The Federation of Sol',
    'The Ghosts of Creuss',
    'The L1Z1X Mindnet',
    'The Mentak Coalition',
    'The Naalu Collective',
    'The Nekro Virus',
    "Sardakk N'orr",
    'The Universities of Jol-Nar',
    'The Winnu',
    'The Xxcha Kingdom',
    'The Yin Brotherhood',
    'The Yssaril Tribes',
    # Prophecy of Kings
    'The Council Keleres',
    'The Empyrean',
    'The Mahact Gene-Sorcerers',
    'The Naaz-Rokha Alliance',
    'The Nomad',
    'The Titans of Ul',
    "The Vuil'raith Cabal",
]


def strategy_card_name(number):
    if number is None:
        return None
    return STRATEGY_CARDS.get(number, f'Card {number}')


def strategy_cards(count):
    return [{'number': n, 'name': strategy_card_name(n)} for n in range(1, count + 1)]
