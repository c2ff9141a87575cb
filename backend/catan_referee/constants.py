"""
Rule constants shared across the referee.
"""

# Piece quotas per player
INITIAL_ROADS = 15
INITIAL_SETTLEMENTS = 5
INITIAL_CITIES = 4

# Session limits
MIN_PLAYERS = 2
MAX_PLAYERS = 4
PLAYER_COLORS = ["#BF2720", "#115EC9", "#DFA629", "#EDEAD9"]  # red, blue, yellow, white

# Victory point thresholds
DEFAULT_VICTORY_POINTS = 10
EXPANSION_VICTORY_POINTS = 13

# Awards
AWARD_POINTS = 2
LONGEST_ROAD_MIN = 5
LARGEST_ARMY_MIN = 3

# Discard on seven
DROP_CARDS_THRESHOLD = 7
CITY_WALL_HAND_BONUS = 2
MAX_CITY_WALLS = 3

# Bank
BANK_RESOURCE_SUPPLY = 19
BANK_COMMODITY_SUPPLY = 12
DEFAULT_TRADE_RATE = 4
GENERIC_PORT_RATE = 3
SPECIFIC_PORT_RATE = 2
MERCHANT_RATE = 2
MERCHANT_FLEET_RATE = 2
TRADING_HOUSE_RATE = 2
TRADING_HOUSE_LEVEL = 3  # trade track level that unlocks 2:1 commodity trades

# Barbarians and knights
TRACK_LENGTH = 7
MIGHTY_POLITICS_LEVEL = 3

# City improvements
MAX_IMPROVEMENT_LEVEL = 5
METROPOLIS_THRESHOLD = 4
METROPOLIS_POINTS = 2
IMPROVEMENT_COSTS = [1, 2, 3, 4, 5]  # indexed by current level

# Progress cards
MAX_PROGRESS_CARDS = 4
SMITH_PROMOTIONS = 2
PRODUCTION_CARD_YIELD = 2  # Irrigation / Mining per matching tile
RESOURCE_MONOPOLY_CAP = 2
TRADE_MONOPOLY_CAP = 1
WEDDING_GIFT = 2
MASTER_MERCHANT_TAKE = 2

# Development cards (base game only)
DEVELOPMENT_CARD_COUNTS = {
    "knight": 14,
    "victory_point": 5,
    "road_building": 2,
    "year_of_plenty": 2,
    "monopoly": 2,
}
FREE_ROADS = 2
YEAR_OF_PLENTY_PICKS = 2
