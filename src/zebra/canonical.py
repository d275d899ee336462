"""The classic Einstein puzzle: five houses, five categories, fifteen clues."""

from .model import Category, Clue, Puzzle

NATIONALITY = Category("Nationality", ("British", "Swedish", "Danish", "Norwegian", "German"))
DRINK = Category("Drink", ("Tea", "Water", "Coffee", "Milk", "Beer"))
COLOR = Category("Color", ("Red", "Blue", "Yellow", "Green", "White"))
SMOKE = Category("Smoke", ("Blend", "Prince", "Dunhill", "Bluemaster", "Pall Mall"))
PET = Category("Pet", ("Dogs", "Birds", "Cats", "Horses", "Fish"))

CATEGORIES = [NATIONALITY, DRINK, COLOR, SMOKE, PET]


def einstein_puzzle() -> Puzzle:
    puzzle = Puzzle(categories=list(CATEGORIES), id="einstein")
    v = puzzle.value
    puzzle.extend([
        Clue.linked(v("British"), v("Red"), "The Brit lives in the red house."),
        Clue.linked(v("Swedish"), v("Dogs"), "The Swede keeps dogs as pets."),
        Clue.linked(v("Danish"), v("Tea"), "The Dane drinks tea."),
        Clue.left_of(v("Green"), v("White"), "The green house is directly left of the white house."),
        Clue.linked(v("Green"), v("Coffee"), "The green house's owner drinks coffee."),
        Clue.linked(v("Pall Mall"), v("Birds"), "The person who smokes Pall Mall rears birds."),
        Clue.linked(v("Yellow"), v("Dunhill"), "The owner of the yellow house smokes Dunhill."),
        Clue.forced(v("Milk"), 2, "The man living in the centre house drinks milk."),
        Clue.forced(v("Norwegian"), 0, "The Norwegian lives in the first house."),
        Clue.next_to(v("Blend"), v("Cats"), "The man who smokes Blend lives next to the one who keeps cats."),
        Clue.next_to(v("Horses"), v("Dunhill"), "The man who keeps horses lives next to the man who smokes Dunhill."),
        Clue.linked(v("Bluemaster"), v("Beer"), "The owner who smokes Bluemaster drinks beer."),
        Clue.linked(v("German"), v("Prince"), "The German smokes Prince."),
        Clue.next_to(v("Norwegian"), v("Blue"), "The Norwegian lives next to the blue house."),
        Clue.next_to(v("Blend"), v("Water"), "The man who smokes Blend has a neighbour who drinks water."),
    ])
    return puzzle
