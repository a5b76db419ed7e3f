"""Canned Mermaid snippets and prompt suggestions shown in the editor."""
from app.exceptions import ExampleNotFoundException

DEFAULT_DIAGRAM = """graph TD
    A[Start] --> B{Is it working?}
    B -->|Yes| C[Great!]
    B -->|No| D[Debug]
    D --> B
"""

EXAMPLES: dict[str, str] = {
    "flowchart": """graph TD
    A[Start] --> B{Is it working?}
    B -->|Yes| C[Great!]
    B -->|No| D[Debug]
    D --> B""",
    "sequence": """sequenceDiagram
    Alice->>John: Hello John, how are you?
    John-->>Alice: Great!
    Alice-)John: See you later!""",
    "classDiagram": """classDiagram
    class Animal {
        +name: string
        +eat(): void
        +sleep(): void
    }
    class Dog {
        +bark(): void
    }
    Animal <|-- Dog""",
    "stateDiagram": """stateDiagram-v2
    [*] --> Still
    Still --> [*]
    Still --> Moving
    Moving --> Still
    Moving --> Crash
    Crash --> [*]""",
    "gantt": """gantt
    title A Gantt Diagram
    dateFormat  YYYY-MM-DD
    section Section
    A task           :a1, 2023-01-01, 30d
    Another task     :after a1, 20d
    section Another
    Task in sec      :2023-01-12, 12d
    another task     :24d""",
}

EXAMPLE_PROMPTS: list[str] = [
    "Create a flowchart showing the user registration process",
    "Draw a sequence diagram for API authentication flow",
    "Make a state diagram for a shopping cart checkout process",
    "Design a class hierarchy for a vehicle rental system",
    "Generate a gantt chart for a website development project",
]

PROMPT_CATEGORIES: list[dict] = [
    {
        "id": "flowcharts",
        "name": "Flowcharts",
        "prompts": [
            {
                "id": "user-registration",
                "title": "User registration",
                "prompt": "Create a flowchart showing the user registration process with email verification",
                "description": "Sign-up form, validation and confirmation email",
            },
            {
                "id": "order-fulfilment",
                "title": "Order fulfilment",
                "prompt": "Draw a flowchart for an e-commerce order from checkout to delivery",
            },
        ],
    },
    {
        "id": "sequences",
        "name": "Sequence diagrams",
        "prompts": [
            {
                "id": "oauth-login",
                "title": "OAuth login",
                "prompt": "Draw a sequence diagram for an OAuth 2.0 authorization code login",
                "description": "Browser, client app, authorization server and API",
            },
        ],
    },
    {
        "id": "structure",
        "name": "Classes & states",
        "prompts": [
            {
                "id": "vehicle-rental",
                "title": "Vehicle rental",
                "prompt": "Design a class hierarchy for a vehicle rental system",
            },
            {
                "id": "cart-checkout",
                "title": "Cart checkout",
                "prompt": "Make a state diagram for a shopping cart checkout process",
            },
        ],
    },
    {
        "id": "planning",
        "name": "Planning",
        "prompts": [
            {
                "id": "website-project",
                "title": "Website project",
                "prompt": "Generate a gantt chart for a website development project",
            },
        ],
    },
]


def get_example(name: str) -> str:
    try:
        return EXAMPLES[name]
    except KeyError:
        raise ExampleNotFoundException(name) from None
