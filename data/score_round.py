"""Score a round described in a JSON file and print the results.
    python3 data/score_round.py data/sample_round.json
    python3 data/score_round.py data/sample_round.json --complete

The file holds a course, the round configuration, the players (exact
handicaps on a 9-hole basis) and their gross strokes per hole.
"""

import argparse
import json
import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import config
from models import Course, RoundConfig
from rounds import InMemoryRoundRepository, RoundService


def load_round(service: RoundService, data: dict) -> str:
    """Create the round, its players and scores. Returns the round id."""
    round_ = service.create_round(
        Course(**data["course"]),
        RoundConfig(**data.get("config", {})),
    )

    player_ids = {}
    for p_data in data["players"]:
        profile = service.register_profile(p_data["name"], p_data["exact_handicap"])
        player = service.add_profile_to_round(round_.id, profile.id)
        player_ids[p_data["name"]] = player.id

    for s_data in data["scores"]:
        service.record_score(
            round_.id,
            player_ids[s_data["player"]],
            s_data["hole"],
            s_data["gross"],
            no_paso_rojas=s_data.get("no_paso_rojas", False),
            abandoned=s_data.get("abandoned", False),
        )
    return round_.id


def main():
    parser = argparse.ArgumentParser(description="Score a golf round from a JSON file.")
    parser.add_argument("round_file", help="Path to the round JSON file")
    parser.add_argument(
        "--complete",
        action="store_true",
        help="Complete the round: apply handicap adjustments and print the archive",
    )
    args = parser.parse_args()

    logging.basicConfig(level=config.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")

    with open(args.round_file) as f:
        data = json.load(f)

    service = RoundService(InMemoryRoundRepository())
    round_id = load_round(service, data)

    output = {
        "standings": [s.model_dump() for s in service.standings(round_id)],
        "awards": service.awards(round_id).model_dump(),
    }
    if args.complete:
        output["adjustments"] = [a.model_dump() for a in service.complete_round(round_id)]
        output["archive"] = service.archive(round_id).model_dump()

    print(json.dumps(output, indent=2, default=str))


if __name__ == "__main__":
    main()
