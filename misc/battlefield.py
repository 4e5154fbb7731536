import os
import random
import multiprocessing

from misc.loaders import get_current_code
from misc.utils import complement, is_valid_proposal


def load_agent_class(display_name: str):
    """
    Load the Agent class from an agent's solution file.
    Returns the Agent class or None if not found/invalid.
    """
    code = get_current_code(display_name)
    if code is None:
        return None

    try:
        namespace = {}
        exec(code, namespace)

        if "Agent" not in namespace:
            return None

        return namespace["Agent"]
    except Exception as e:
        print(f"Failed to load agent for {display_name}: {e}")
        return None


def validate_agent(agent_class) -> tuple[bool, str | None]:
    """
    Smoke-test an Agent class on a small scenario, from both seats.

    Returns (is_valid, error_message)
    """
    counts = [2, 3, 1]
    values = [1, 2, 3]
    max_rounds = 5

    try:
        first = agent_class(0, counts, values, max_rounds)
        opening = first.offer(None)
        if not is_valid_proposal(opening, counts):
            return False, f"Invalid opening proposal: {opening!r}"

        second = agent_class(1, counts, values, max_rounds)
        reply = second.offer(complement(counts, opening))
        if reply is not None and not is_valid_proposal(reply, counts):
            return False, f"Invalid counter-proposal: {reply!r}"
    except Exception as e:
        return False, str(e)

    return True, None


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def generate_negotiation_data(seed: int | None = None):
    """
    Generate haggling scenarios with shared counts and per-player values.

    Every scenario has 2-10 item types with counts 1-5. Each player's values
    are 0-10 per unit and add up to the same worth (32, 64 or 128); rounds are
    worth // 4. Fewer than half of a player's values are zero.

    Returns:
        A tuple of (negotiation_data, total_target_worth).
    """
    max_scenario_data = _env_int("MAX_SCENARIO_DATA", 20)
    if seed is None and os.getenv("SCENARIO_SEED"):
        seed = _env_int("SCENARIO_SEED", 0)
    rng = random.Random(seed)

    def unit_value():
        # Undesirables are rare but matter to haggling strategies.
        return 0 if rng.random() < 0.1 else rng.randint(1, 10)

    def player_values(counts, worth):
        *head, c1, c2 = counts
        for _ in range(1000):
            values = [unit_value() for _ in head]
            remaining = worth - sum(c * v for c, v in zip(head, values))
            for v1 in range(11):
                leftover = remaining - c1 * v1
                if leftover >= 0 and leftover % c2 == 0 and leftover // c2 <= 10:
                    candidate = values + [v1, leftover // c2]
                    if sum(1 for v in candidate if v == 0) * 2 < len(candidate):
                        return candidate
                    break
        return None

    data = []
    total_target_worth = 0
    for _ in range(max_scenario_data):
        counts = [rng.randint(1, 5) for _ in range(rng.randint(2, 10))]
        worth = rng.choice([32, 64, 128])

        values_0 = player_values(counts, worth)
        values_1 = player_values(counts, worth)
        if not values_0 or not values_1:
            continue

        data.append(
            {
                "counts": counts,
                "player_0": values_0,
                "player_1": values_1,
                "rounds": worth // 4,
            }
        )
        total_target_worth += worth

    return data, total_target_worth


def run_negotiation(agent_0, agent_1, counts, max_rounds, name_0: str, name_1: str):
    """
    Run one match: agent_0 opens, then the agents alternate for max_rounds rounds.

    Proposals name what the proposer keeps; the counterpart receives the
    complement. Returns a tuple (agent_0_items, agent_1_items, outcome, turn_history)
    where outcome is 'deal', 'no_deal', 'error_agent_0' or 'error_agent_1'.
    """
    offer = None
    turn_history = []
    key_0 = f"{name_0} offer"
    key_1 = f"{name_1} offer"

    for round_num in range(max_rounds):
        record = {"round": round_num + 1, key_0: None, key_1: None}

        try:
            response_0 = agent_0.offer(offer)
        except Exception as e:
            print(f"Agent 0 error: {e}")
            return None, None, "error_agent_0", turn_history

        if response_0 is None:
            turn_history.append(record)
            if offer is None:
                # accepting before anything was proposed
                return None, None, "error_agent_0", turn_history
            return offer, complement(counts, offer), "deal", turn_history
        if not is_valid_proposal(response_0, counts):
            print(f"Agent 0 made an invalid proposal: {response_0!r}")
            turn_history.append(record)
            return None, None, "error_agent_0", turn_history

        record[key_0] = list(response_0)

        try:
            response_1 = agent_1.offer(complement(counts, response_0))
        except Exception as e:
            print(f"Agent 1 error: {e}")
            turn_history.append(record)
            return None, None, "error_agent_1", turn_history

        if response_1 is None:
            turn_history.append(record)
            return list(response_0), complement(counts, response_0), "deal", turn_history
        if not is_valid_proposal(response_1, counts):
            print(f"Agent 1 made an invalid proposal: {response_1!r}")
            turn_history.append(record)
            return None, None, "error_agent_1", turn_history

        record[key_1] = list(response_1)
        turn_history.append(record)
        offer = complement(counts, response_1)

    return None, None, "no_deal", turn_history


def calculate_profit(items, values):
    """Calculate the profit (sum of item * value) for a player."""
    if items is None:
        return 0
    return sum(n * v for n, v in zip(items, values))


def _run_model_pair_task(args):
    model_0, model_1, negotiation_data, num_samples = args
    name_a = model_0["display_name"]
    name_b = model_1["display_name"]
    agent_a = load_agent_class(name_a)
    if agent_a is None:
        print(f"Skipping {name_a}: no valid agent found")
        return {}, {}
    agent_b = load_agent_class(name_b)
    if agent_b is None:
        print(f"Skipping opponent {name_b}: no valid agent found")
        return {}, {}

    pair_results = {name_a: {"total_profit": 0}, name_b: {"total_profit": 0}}
    pair_key = tuple(sorted([name_a, name_b]))
    samples = []
    sample_counts = {"as_agent_0": 0, "as_agent_1": 0}
    limits = {"as_agent_0": (num_samples + 1) // 2, "as_agent_1": num_samples // 2}

    seatings = [
        (name_a, name_b, agent_a, agent_b),
        (name_b, name_a, agent_b, agent_a),
    ]
    for name_0, name_1, class_0, class_1 in seatings:
        print(f"\nBattle: {name_0} vs {name_1}")

        for scenario in negotiation_data:
            counts = scenario["counts"]
            values_0 = scenario["player_0"]
            values_1 = scenario["player_1"]
            max_rounds = scenario["rounds"]

            try:
                items_0, items_1, outcome, turn_history = run_negotiation(
                    class_0(0, counts, values_0, max_rounds),
                    class_1(1, counts, values_1, max_rounds),
                    counts,
                    max_rounds,
                    name_0,
                    name_1,
                )
            except Exception as e:
                print(f"  Error in scenario: {e}")
                continue

            profit_0 = calculate_profit(items_0, values_0)
            profit_1 = calculate_profit(items_1, values_1)
            pair_results[name_0]["total_profit"] += profit_0
            pair_results[name_1]["total_profit"] += profit_1
            print(f"  Scenario result: {outcome}, profits: {name_0}={profit_0}, {name_1}={profit_1}")

            position = "as_agent_0" if name_0 == pair_key[0] else "as_agent_1"
            if sample_counts[position] < limits[position]:
                samples.append(
                    {
                        "scenario": {
                            "counts": counts,
                            "rounds": max_rounds,
                            f"{name_0} values": values_0,
                            f"{name_1} values": values_1,
                        },
                        "outcome": outcome,
                        f"{name_0} profit": profit_0,
                        f"{name_1} profit": profit_1,
                        "turn_history": turn_history,
                    }
                )
                sample_counts[position] += 1

    return pair_results, {pair_key: samples}


def _merge(results, battle_scenarios, pair_results, pair_scenarios):
    for name, data in pair_results.items():
        results.setdefault(name, {"total_profit": 0})
        results[name]["total_profit"] += data["total_profit"]
    for key, scenarios in pair_scenarios.items():
        battle_scenarios.setdefault(key, []).extend(scenarios)


def run_battles(models: list[dict], negotiation_data: list[dict], num_samples: int | None = None):
    """
    Play every pair of agents against each other on every scenario, in both seats.

    Returns:
        A tuple of (results, battle_scenarios): total profit per agent and,
        per agent pair, up to num_samples recorded matches.
    """
    if num_samples is None:
        num_samples = _env_int("NUM_SAMPLES", 5)

    results = {model["display_name"]: {"total_profit": 0} for model in models}
    battle_scenarios = {}

    tasks = [
        (models[i], models[j], negotiation_data, num_samples)
        for i in range(len(models))
        for j in range(i + 1, len(models))
    ]

    cpu_count = multiprocessing.cpu_count()
    max_processes = os.getenv("NUM_PROCESSES")
    try:
        processes = max(1, min(int(max_processes), cpu_count)) if max_processes else min(8, cpu_count)
    except ValueError:
        processes = min(8, cpu_count)

    if processes == 1 or len(tasks) < 2:
        for task in tasks:
            _merge(results, battle_scenarios, *_run_model_pair_task(task))
    else:
        with multiprocessing.Pool(processes=processes) as pool:
            for pair_results, pair_scenarios in pool.imap_unordered(_run_model_pair_task, tasks):
                _merge(results, battle_scenarios, pair_results, pair_scenarios)

    return results, battle_scenarios
