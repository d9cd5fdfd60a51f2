""" Example: derive test scenarios from a canvas workflow stored as YAML. """
import json
import logging

from process_compiler.scenarios.generator import generate_test_scenarios, load_canvas_workflow

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)

CANVAS_YAML = """
name: Smart Proposal Follow-up
canvas_data:
  nodes:
    - id: t1
      type: trigger
      data: { label: Deal Created, triggerType: deal_created }
    - id: c1
      type: condition
      data: { label: High value, condition: "deal_value > 10000" }
    - id: c2
      type: condition
      data: { label: Proposal stage, field: stage, operator: "==", value: Proposal }
    - id: a1
      type: action
      data: { label: Create follow-up task }
  edges:
    - { source: t1, target: c1 }
    - { source: c1, target: c2 }
    - { source: c2, target: a1 }
"""


def main():
    workflow = load_canvas_workflow(CANVAS_YAML)
    for scenario in generate_test_scenarios(workflow):
        print(f"[{scenario.category}/{scenario.expected_outcome}] {scenario.name}")
        print(json.dumps(scenario.test_data, indent=2, default=str))


if __name__ == '__main__':
    main()
