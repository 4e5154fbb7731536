from dotenv import load_dotenv
import json
import os

from misc.battlefield import generate_negotiation_data, run_battles, validate_agent, load_agent_class
from misc.loaders import load_models, load_strategy

# Load environment variables from .env file
load_dotenv()


def main():
    strategy = load_strategy()
    print(f"Haggler strategy: {strategy.to_dict()}")

    models = load_models()
    for model in models.copy():
        display_name = model["display_name"]
        agent_class = load_agent_class(display_name)
        is_valid, error = (False, "no solution file") if agent_class is None else validate_agent(agent_class)
        if not is_valid:
            print(f"Dropping {display_name}: {error}")
            models.remove(model)
    print(f"Loaded agents: {[m['display_name'] for m in models]}")

    if len(models) < 2:
        print("Not enough agents to run battles (need at least 2)")
        return

    negotiation_data, total_target_worth = generate_negotiation_data()
    print(f"Generated {len(negotiation_data)} negotiation scenarios")
    print(f"Total target worth: {total_target_worth}")
    print(json.dumps(negotiation_data[:2], indent=2))

    print("\n" + "=" * 50)
    print("Starting negotiation battles...")
    print("=" * 50)
    battle_results, battle_scenarios = run_battles(models, negotiation_data)

    # every agent meets every other agent twice per scenario, once from each seat
    max_possible_profit = total_target_worth * 2 * (len(models) - 1)
    print("\n" + "=" * 50)
    print("Battle Results Summary:")
    print("=" * 50)
    for name, stats in sorted(
        battle_results.items(), key=lambda kv: kv[1]["total_profit"], reverse=True
    ):
        total_profit = stats["total_profit"]
        percentage = total_profit * 100.0 / max_possible_profit if max_possible_profit > 0 else 0
        print(f"{name}: total_profit={total_profit}, profit_percentage={percentage:.2f}%")

    samples_path = os.getenv("BATTLE_SAMPLES_PATH")
    if samples_path:
        with open(samples_path, "w") as f:
            json.dump(
                {" vs ".join(key): samples for key, samples in battle_scenarios.items()},
                f,
                indent=2,
            )
        print(f"Saved battle samples to {samples_path}")


if __name__ == "__main__":
    main()
