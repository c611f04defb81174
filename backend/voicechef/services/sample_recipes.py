"""
Recipes served when no catalog file is configured. The first one doubles as
the fallback recipe for sessions whose requested recipe cannot be fetched.
"""

SAMPLE_RECIPES = [
    {
        "id": "rajma-chawal",
        "title": "Rajma Chawal",
        "category": "main-course",
        "description": "A North Indian comfort food combining kidney bean curry with rice.",
        "ingredients": [
            "1 cup rajma (kidney beans)",
            "2 cups rice",
            "2 onions, chopped",
            "3 tomatoes, chopped",
            "2 tsp ginger-garlic paste",
            "1 tsp cumin seeds",
            "2 tsp red chili powder",
            "1 tsp turmeric powder",
            "1 tsp garam masala",
            "Salt to taste",
            "2 tbsp oil",
        ],
        "steps": [
            {"instruction": "Soak rajma overnight and boil until tender.", "duration_seconds": 1800},
            {"instruction": "Heat oil in a pan and add cumin seeds.", "duration_seconds": 120},
            {"instruction": "Add onions and saute until golden brown.", "duration_seconds": 300},
            {"instruction": "Add ginger-garlic paste and cook for 2 minutes.", "duration_seconds": 120},
            {"instruction": "Add tomatoes and cook until soft.", "duration_seconds": 480},
            {"instruction": "Add spices and cook for 2 minutes.", "duration_seconds": 120},
            {"instruction": "Add boiled rajma and simmer for 15 minutes.", "duration_seconds": 900},
            {"instruction": "Serve hot with steamed rice.", "duration_seconds": 0},
        ],
    },
    {
        "id": "mushroom-risotto",
        "title": "Creamy Mushroom Risotto",
        "category": "main-course",
        "description": "Rich and creamy risotto with wild mushrooms and parmesan cheese.",
        "ingredients": [
            "2 cups Arborio rice",
            "1 lb mixed mushrooms",
            "4 cups warm chicken broth",
            "1 cup dry white wine",
            "1/2 cup grated Parmesan",
            "2 shallots, minced",
            "3 cloves garlic",
            "Fresh thyme and parsley",
        ],
        "steps": [
            {"instruction": "Heat olive oil in a large pan and cook the mushrooms until golden brown.", "duration_seconds": 300},
            {"instruction": "Add minced shallots and garlic, cook until fragrant.", "duration_seconds": 120},
            {"instruction": "Add Arborio rice and stir until lightly toasted.", "duration_seconds": 120},
            {"instruction": "Pour in white wine and stir until absorbed.", "duration_seconds": 0},
            {"instruction": "Add warm broth one ladle at a time, stirring until the rice is creamy.", "duration_seconds": 1080},
            {"instruction": "Stir in Parmesan, butter and fresh herbs. Season with salt and pepper.", "duration_seconds": 0},
        ],
    },
    {
        "id": "chocolate-lava-cake",
        "title": "Chocolate Lava Cake",
        "category": "dessert",
        "description": "Individual chocolate cakes with molten centers.",
        "ingredients": [
            "4 oz dark chocolate",
            "4 tbsp butter",
            "2 large eggs",
            "2 tbsp granulated sugar",
            "2 tbsp all-purpose flour",
            "Pinch of salt",
        ],
        "steps": [
            {"instruction": "Preheat oven to 425F and butter two ramekins.", "duration_seconds": 0},
            {"instruction": "Melt chocolate and butter, stirring until smooth.", "duration_seconds": 0},
            {"instruction": "Whisk eggs and sugar until thick and pale, then fold in the chocolate.", "duration_seconds": 0},
            {"instruction": "Fold in flour and salt and divide between the ramekins.", "duration_seconds": 0},
            {"instruction": "Bake until the edges are firm but the centers still jiggle.", "duration_seconds": 780},
            {"instruction": "Let cool for 1 minute, then invert onto plates and serve.", "duration_seconds": 60},
        ],
    },
]
