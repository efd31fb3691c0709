"""
Nurse Roster Data Generator

Generates a realistic roster (nurses with capabilities, seniority and
submitted preferences) plus staffing rules for one scheduling period, in the
JSON shape accepted by nurse_scheduler.schemas.

Run: python scripts/generate_data.py [--nurses 24] [--days 14]
"""

import argparse
import json
import os
import random
from datetime import date, datetime, timedelta
from typing import Dict, List

# Configuration
NUM_NURSES = 24
DAYS = 14
PERIOD_START = date(2024, 3, 4)  # a Monday

FIRST_NAMES = ["Emma", "James", "Olivia", "Liam", "Ava", "Noah", "Sophia", "William",
               "Isabella", "Benjamin", "Mia", "Lucas", "Charlotte", "Henry", "Amelia",
               "Ethan", "Harper", "Alexander", "Evelyn", "Daniel", "Abigail", "Matthew",
               "Emily", "Jackson", "Elizabeth", "Sofia", "Avery", "Owen", "Ella", "Grace"]
LAST_NAMES = ["Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller",
              "Davis", "Rodriguez", "Martinez", "Hernandez", "Lopez", "Wilson",
              "Anderson", "Thomas", "Taylor", "Moore", "Jackson", "Martin", "Lee", "White"]

RULES = {
    "min_shifts_per_nurse": 3,
    "max_shifts_per_nurse": 10,
    "min_consecutive_days": 1,
    "max_consecutive_days": 5,
    "min_rest_between_shifts": 8,
    "max_pto_per_nurse": 3,
    "max_no_schedule_per_nurse": 2,
    "max_total_time_off": 4,
    "required_coverage": {"day": 3, "night": 2, "weekend_day": 2, "weekend_night": 2},
    "max_weekends_per_nurse": 2,
    "require_alternating_weekends": False,
    "require_even_distribution": True,
    "enable_seniority_bias": False,
    "seniority_bias_weight": 0.3,
}


def generate_names(count: int) -> List[str]:
    """Unique full names"""
    names = set()
    while len(names) < count:
        names.add(f"{random.choice(FIRST_NAMES)} {random.choice(LAST_NAMES)}")
    return sorted(names)


def generate_preferences(days: List[date], shift_types: List[str]) -> Dict:
    """Preferences for one nurse: a few preferred shifts, some time off"""
    shuffled = random.sample(days, k=len(days))

    num_pto = random.choice([0, 0, 1, 2, 3])
    num_no_schedule = random.choice([0, 0, 1, 2])
    # Total time off stays within the rules
    num_no_schedule = min(num_no_schedule, RULES["max_total_time_off"] - num_pto)

    pto = shuffled[:num_pto]
    no_schedule = shuffled[num_pto:num_pto + num_no_schedule]
    remaining = shuffled[num_pto + num_no_schedule:]

    options = shift_types + ["ANY"]
    preferred = {
        d.isoformat(): random.choice(options)
        for d in remaining[:random.randint(2, 6)]
    }

    return {
        "preferred_shifts": preferred,
        "pto_requests": sorted(d.isoformat() for d in pto),
        "no_schedule_requests": sorted(d.isoformat() for d in no_schedule),
        "flexibility_score": random.randint(1, 10),
    }


def generate_nurses(num_nurses: int, days: List[date]) -> List[Dict]:
    """Nurse records; about 70% work both shifts, the rest one shift type"""
    nurses = []
    for index, name in enumerate(generate_names(num_nurses), start=1):
        roll = random.random()
        if roll < 0.7:
            shift_types = ["DAY", "NIGHT"]
        elif roll < 0.85:
            shift_types = ["DAY"]
        else:
            shift_types = ["NIGHT"]

        full_time = random.random() < 0.75
        nurse = {
            "id": f"N{index:03d}",
            "name": name,
            # 50% level 1-2, 30% level 3, 20% level 4-5
            "seniority_level": random.choices([1, 2, 3, 4, 5], weights=[25, 25, 30, 10, 10])[0],
            "shift_types": shift_types,
            "max_shifts_per_block": 10 if full_time else 6,
            "contract_hours_per_week": 40 if full_time else 24,
        }

        # A few nurses have not submitted preferences yet
        if random.random() < 0.9:
            nurse["preferences"] = generate_preferences(days, shift_types)

        nurses.append(nurse)
    return nurses


def generate_roster(num_nurses: int = NUM_NURSES, num_days: int = DAYS) -> Dict:
    """Full generation payload: period, nurses and rules"""
    days = [PERIOD_START + timedelta(days=offset) for offset in range(num_days)]
    return {
        "period_start": days[0].isoformat(),
        "period_end": days[-1].isoformat(),
        "nurses": generate_nurses(num_nurses, days),
        "rules": RULES,
    }


def print_summary(roster: Dict):
    """Print summary statistics"""
    nurses = roster["nurses"]
    print("\n" + "=" * 60)
    print("DATA GENERATION SUMMARY")
    print("=" * 60)

    print(f"\nPeriod: {roster['period_start']} to {roster['period_end']}")
    print(f"Nurses: {len(nurses)}")
    print(f"  Both shifts: {sum(1 for n in nurses if len(n['shift_types']) == 2)}")
    print(f"  Day only: {sum(1 for n in nurses if n['shift_types'] == ['DAY'])}")
    print(f"  Night only: {sum(1 for n in nurses if n['shift_types'] == ['NIGHT'])}")
    print(f"  With preferences: {sum(1 for n in nurses if 'preferences' in n)}")

    pto_days = sum(len(n.get('preferences', {}).get('pto_requests', [])) for n in nurses)
    print(f"\nPTO days requested: {pto_days}")
    print("=" * 60)


def main():
    parser = argparse.ArgumentParser(description="Generate a sample nurse roster")
    parser.add_argument("--nurses", type=int, default=NUM_NURSES, help="Number of nurses")
    parser.add_argument("--days", type=int, default=DAYS, help="Length of the period in days")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--output", default="data/roster.json", help="Output file")
    args = parser.parse_args()

    print("Generating nurse roster data...")
    random.seed(args.seed)  # For reproducibility

    roster = generate_roster(args.nurses, args.days)
    roster["generated_at"] = datetime.now().isoformat()

    directory = os.path.dirname(args.output)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(args.output, 'w') as f:
        json.dump(roster, f, indent=2)

    print(f"\n✓ Generated {args.output}")
    print_summary(roster)


if __name__ == "__main__":
    main()
