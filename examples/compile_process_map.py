""" Example: compile a process description + Mermaid diagram and print the result. """
import logging

from process_compiler.integrations.export import definition_to_mermaid, definition_to_yaml
from process_compiler.workflow.compiler import compile_process
from process_compiler.workflow.schema import execution_order

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)

DESCRIPTION = """
1. HubSpot OAuth Connection: Connects via webhook once the user authorizes.
   - Exchange the authorization code for tokens
2. Fetch Contacts: Calls the HubSpot API to get contacts by id.
3. Check Deal Value: If the deal is above threshold, route to the owner.
4. Store Record: Saves the contact to the contacts table.
5. Send Notification: Emails the summary to the owner's email.
"""

MERMAID = """
flowchart TD
    subgraph intake ["Lead Intake"]
        oauth((HubSpot OAuth)) --> fetch[Fetch Contacts]
    end
    fetch --> check{Deal value?}
    check -->|high_value| send[[Send Notification]]
    check -->|low_value| store[(Store Record)]
    store --> send
"""


def main():
    definition = compile_process(DESCRIPTION, MERMAID, process_map_id="pm_demo", org_id="org_demo")
    print(definition_to_yaml(definition))
    print("Execution order:", " -> ".join(execution_order(definition)))
    print(definition_to_mermaid(definition))


if __name__ == '__main__':
    main()
