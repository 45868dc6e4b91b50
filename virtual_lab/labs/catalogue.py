"""
virtual_lab/labs/catalogue.py
Static catalogue: categories, experiments, their content blocks and quizzes.
Loaded into the database by seed_database() / `flask seed-db`.
"""
from __future__ import annotations

from typing import Any, Dict, List

from flask import current_app

from virtual_lab import db
from virtual_lab.models import Category, Experiment, Quiz, QuizQuestion

SEED_AUTHOR = "seed_user_id"

# ── Categories ────────────────────────────────────────────────────────────────
CATEGORIES: List[Dict[str, Any]] = [
    {
        "slug": "iot",
        "name": "Internet of Things",
        "description": "Learn about IoT devices, sensors, and connectivity",
        "icon": "Cpu",
        "color": "#10b981",
        "display_order": 1,
    },
    {
        "slug": "electronics",
        "name": "Electronics",
        "description": "Explore circuits, components, and electronic systems",
        "icon": "Zap",
        "color": "#f59e0b",
        "display_order": 2,
    },
    {
        "slug": "computer-science",
        "name": "Computer Science",
        "description": "Study algorithms, data structures, and programming",
        "icon": "Code",
        "color": "#3b82f6",
        "display_order": 3,
    },
]

# ── Experiments ───────────────────────────────────────────────────────────────
# Only experiments with authored content are published; the rest are listed
# in the database as drafts until their sections are written.

EXPERIMENTS: List[Dict[str, Any]] = [

    # ═══════════════════════════ IOT ═════════════════════════════════════════

    {
        "slug": "raspberry-pi-intro",
        "category": "iot",
        "title": "Introduction to Raspberry Pi",
        "description": "Learn the basics of Raspberry Pi, its components, and how to set it up for your first project.",
        "difficulty": "beginner",
        "estimated_duration": 45,
        "published": True,
        "featured": True,
        "tags": ["raspberry-pi", "iot", "gpio"],
        "prerequisites": ["Basic computer knowledge"],
        "aim": {
            "description": (
                "Gain an understanding of the Raspberry Pi, including its features, "
                "capabilities, and applications in real-world scenarios."
            ),
            "objectives": [
                "Understand what Raspberry Pi is and its applications",
                "Identify the key components of a Raspberry Pi board",
                "Set up Raspberry Pi OS and connect peripherals",
                "Learn about GPIO pins and their functions",
                "Write and run a simple Python program on Raspberry Pi",
            ],
            "outcomes": [
                "Successfully boot and configure Raspberry Pi",
                "Navigate the Raspberry Pi OS interface",
                "Understand GPIO pin layout and numbering",
                "Execute basic Python scripts",
                "Prepare for hardware interfacing projects",
            ],
        },
        "theory": {
            "sections": [
                {
                    "title": "What is Raspberry Pi?",
                    "content": (
                        "Raspberry Pi is a series of small single-board computers developed "
                        "by the Raspberry Pi Foundation to promote teaching of computer "
                        "science in schools."
                    ),
                },
                {
                    "title": "GPIO Pins",
                    "content": (
                        "General Purpose Input/Output pins let the board read sensors and "
                        "drive LEDs, motors and other external devices. They operate at 3.3V."
                    ),
                },
                {
                    "title": "Connectivity",
                    "content": (
                        "USB ports for peripherals, HDMI for displays, Ethernet and Wi-Fi for "
                        "networking, and a micro SD card slot holding the operating system."
                    ),
                },
                {
                    "title": "Applications",
                    "content": (
                        "Home automation, weather stations, media centres, robotics and "
                        "IoT gateways are common Raspberry Pi projects."
                    ),
                },
            ]
        },
        "procedure": {
            "steps": [
                {
                    "title": "Unboxing and Initial Setup",
                    "description": "Prepare your Raspberry Pi for first use",
                    "instructions": [
                        "Carefully remove the Raspberry Pi from its anti-static packaging",
                        "Check all components: board, power supply, SD card, HDMI cable",
                        "Inspect the board for any physical damage",
                        "Place the board on a non-conductive surface",
                    ],
                },
                {
                    "title": "Installing the Operating System",
                    "description": "Set up Raspberry Pi OS on your SD card",
                    "instructions": [
                        "Download Raspberry Pi Imager from the official website",
                        "Insert the SD card into your computer using a card reader",
                        "Select \"Raspberry Pi OS (32-bit)\" and your SD card, then click \"Write\"",
                        "Safely eject the SD card from your computer",
                    ],
                },
                {
                    "title": "Hardware Connections",
                    "description": "Connect all peripherals to your Raspberry Pi",
                    "instructions": [
                        "Insert the prepared SD card into the SD card slot",
                        "Connect the HDMI cable to your monitor",
                        "Connect a USB keyboard and mouse",
                        "Finally, connect the power supply to boot up the system",
                    ],
                },
                {
                    "title": "Testing GPIO Functionality",
                    "description": "Verify that GPIO pins are working correctly",
                    "instructions": [
                        "Open the Terminal application from the menu",
                        "Run the command: gpio readall",
                        "Note the different pin numbering schemes (BCM vs Board)",
                    ],
                },
                {
                    "title": "Running Your First Program",
                    "description": "Test the Raspberry Pi with a simple Python script",
                    "instructions": [
                        "Open Thonny Python IDE from the Programming menu",
                        "Create a new file and save it as \"hello_pi.py\"",
                        "Type: print(\"Hello from Raspberry Pi!\") and press F5",
                    ],
                },
            ],
            "safety_notes": [
                "Always disconnect power before making hardware changes",
                "Do not connect/disconnect components while powered on",
                "Use the official power supply (5V, 3A minimum for Pi 4)",
            ],
        },
        "simulation": {
            "gpio_pins": [17, 18, 27, 22],
            "instructions": [
                "Connect LED to GPIO pin",
                "Click a pin to toggle it between HIGH and LOW",
                "Run the Python code to see the same effect on real hardware",
            ],
            "code_example": (
                "import RPi.GPIO as GPIO\n"
                "GPIO.setmode(GPIO.BCM)\n"
                "GPIO.setup(17, GPIO.OUT)\n"
                "GPIO.output(17, GPIO.HIGH)"
            ),
            "learning_points": ["GPIO basics", "LED control"],
        },
        "quizzes": [
            {
                "quiz_type": "pretest",
                "title": "Raspberry Pi Pre-Assessment",
                "passing_percentage": 70,
                "questions": [
                    {
                        "question_text": "What does GPIO stand for in Raspberry Pi?",
                        "options": [
                            "General Purpose Input Output",
                            "Global Port Input Output",
                            "General Processing Internal Operation",
                            "Graphical Pin Interface Output",
                        ],
                        "correct_answer": 0,
                        "explanation": "GPIO stands for General Purpose Input/Output.",
                    },
                    {
                        "question_text": "What is the function of GPIO pins on a Raspberry Pi?",
                        "options": [
                            "Store the operating system",
                            "Control and read signals from external devices",
                            "Display images on the screen",
                            "Increase internet speed",
                        ],
                        "correct_answer": 1,
                        "explanation": "GPIO pins connect the board to sensors, LEDs and other devices.",
                    },
                    {
                        "question_text": "Which Raspberry Pi pins are used to complete an electrical circuit?",
                        "options": ["GPIO pins", "GND pins", "Power pins", "All of the above"],
                        "correct_answer": 3,
                        "explanation": "A circuit needs a signal or power pin and a ground pin.",
                    },
                    {
                        "question_text": "Which operating system is commonly used on Raspberry Pi?",
                        "options": [
                            "Windows 11",
                            "macOS",
                            "Raspberry Pi OS (formerly Raspbian)",
                            "Android",
                        ],
                        "correct_answer": 2,
                        "explanation": "Raspberry Pi OS is the official operating system.",
                    },
                    {
                        "question_text": "Which language ships with Raspberry Pi OS for GPIO programming?",
                        "options": ["COBOL", "Python", "Fortran", "Pascal"],
                        "correct_answer": 1,
                        "explanation": "Python and the RPi.GPIO library come preinstalled.",
                    },
                ],
            },
            {
                "quiz_type": "posttest",
                "title": "Raspberry Pi Post-Assessment",
                "passing_percentage": 70,
                "questions": [
                    {
                        "question_text": "When a GPIO pin is set to HIGH state, what voltage does it output?",
                        "options": ["5V", "3.3V", "1.8V", "12V"],
                        "correct_answer": 1,
                        "explanation": "Raspberry Pi GPIO pins output 3.3V when set to HIGH.",
                    },
                    {
                        "question_text": "What is the purpose of GPIO.cleanup() in Python code?",
                        "options": [
                            "To delete Python files",
                            "To reset the Raspberry Pi",
                            "To release GPIO resources and reset pin states",
                            "To clean the SD card",
                        ],
                        "correct_answer": 2,
                        "explanation": "GPIO.cleanup() releases GPIO resources and resets pins to their default state.",
                    },
                    {
                        "question_text": "Which pin numbering mode uses the Broadcom SOC channel numbers?",
                        "options": ["GPIO.BOARD", "GPIO.BCM", "GPIO.PHYSICAL", "GPIO.WPI"],
                        "correct_answer": 1,
                        "explanation": "GPIO.BCM uses Broadcom channel numbers; GPIO.BOARD uses physical pin numbers.",
                    },
                    {
                        "question_text": "What happens if you connect an LED directly to a GPIO pin without a resistor?",
                        "options": [
                            "The LED will work perfectly",
                            "Nothing will happen",
                            "The LED or GPIO pin could be damaged due to excessive current",
                            "The Raspberry Pi will shut down",
                        ],
                        "correct_answer": 2,
                        "explanation": "Without a current-limiting resistor, excessive current can damage both.",
                    },
                    {
                        "question_text": "Which command can you use to view the GPIO pin layout in the terminal?",
                        "options": ["ls -gpio", "gpio readall", "cat /gpio", "show pins"],
                        "correct_answer": 1,
                        "explanation": "\"gpio readall\" prints every pin with its mode and state.",
                    },
                ],
            },
        ],
    },
    {
        "slug": "arduino-basics",
        "category": "iot",
        "title": "Arduino Programming Basics",
        "description": "Get started with Arduino microcontrollers and learn to program digital circuits.",
        "difficulty": "beginner",
        "estimated_duration": 60,
    },
    {
        "slug": "mqtt-protocol",
        "category": "iot",
        "title": "MQTT Protocol for IoT",
        "description": "Learn about MQTT, a lightweight messaging protocol perfect for IoT applications.",
        "difficulty": "intermediate",
        "estimated_duration": 90,
    },

    # ═══════════════════════════ ELECTRONICS ═════════════════════════════════

    {
        "slug": "led-circuit",
        "category": "electronics",
        "title": "LED Circuit Design",
        "description": "Learn to design and build basic LED circuits with resistors.",
        "difficulty": "beginner",
        "estimated_duration": 30,
    },
    {
        "slug": "transistor-basics",
        "category": "electronics",
        "title": "Transistor Fundamentals",
        "description": "Explore how transistors work as switches and amplifiers.",
        "difficulty": "intermediate",
        "estimated_duration": 75,
    },

    # ═══════════════════════════ COMPUTER SCIENCE ════════════════════════════

    {
        "slug": "binary-search",
        "category": "computer-science",
        "title": "Binary Search Algorithm",
        "description": "Master the binary search algorithm and understand its efficiency.",
        "difficulty": "beginner",
        "estimated_duration": 40,
    },
    {
        "slug": "sorting-algorithms",
        "category": "computer-science",
        "title": "Sorting Algorithms Comparison",
        "description": "Compare different sorting algorithms and their performance characteristics.",
        "difficulty": "intermediate",
        "estimated_duration": 90,
    },
    {
        "slug": "data-structures",
        "category": "computer-science",
        "title": "Essential Data Structures",
        "description": "Learn about stacks, queues, linked lists, and trees.",
        "difficulty": "intermediate",
        "estimated_duration": 120,
    },
]


def _build_experiment(entry: Dict[str, Any], category: Category) -> Experiment:
    experiment = Experiment(
        category=category,
        slug=entry["slug"],
        title=entry["title"],
        description=entry["description"],
        difficulty=entry["difficulty"],
        estimated_duration=entry["estimated_duration"],
        aim=entry.get("aim"),
        theory=entry.get("theory"),
        procedure=entry.get("procedure"),
        simulation=entry.get("simulation"),
        tags=entry.get("tags", []),
        prerequisites=entry.get("prerequisites", []),
        published=entry.get("published", False),
        featured=entry.get("featured", False),
        created_by=SEED_AUTHOR,
    )
    for quiz_data in entry.get("quizzes", []):
        quiz = Quiz(
            quiz_type=quiz_data["quiz_type"],
            title=quiz_data["title"],
            passing_percentage=quiz_data["passing_percentage"],
        )
        for order, q in enumerate(quiz_data["questions"], start=1):
            quiz.questions.append(QuizQuestion(
                question_text=q["question_text"],
                options=q["options"],
                correct_answer=q["correct_answer"],
                explanation=q.get("explanation"),
                display_order=order,
            ))
        experiment.quizzes.append(quiz)
    return experiment


def seed_database() -> bool:
    """
    Insert the catalogue when the category table is empty.
    Returns True if rows were written, False if data already existed.
    """
    existing = Category.query.count()
    if existing:
        current_app.logger.info("Catalogue already has %d categories, skipping seed", existing)
        return False

    categories = {}
    for entry in CATEGORIES:
        category = Category(**entry)
        db.session.add(category)
        categories[entry["slug"]] = category

    for entry in EXPERIMENTS:
        db.session.add(_build_experiment(entry, categories[entry["category"]]))

    db.session.commit()
    current_app.logger.info(
        "Seeded %d categories and %d experiments", len(CATEGORIES), len(EXPERIMENTS)
    )
    return True
