"""
Sample tagged test definitions.

Run the generate_specs tool on this file to get calculator.feature and
division.feature; run generate_stubs on those to get the stubs back.
"""

from gherkin_sync_mcp.tags import and_, example, feature, given, scenario, then, when


@feature("Calculator", narrative="""
    In order to avoid silly mistakes
    As a math idiot
    I want to be told the sum of two numbers
""")
class Calculator:

    @scenario("Add two numbers")
    def AddTwoNumbers(self):
        given("I have entered {0} into the calculator", 1)
        and_("I have entered {0} into the calculator", 2)
        when("I press add")
        then("the result should be {0} on the screen", 3)
        raise NotImplementedError


@feature("Division")
class Division:
    """Dividing by a number gives a quotient and a remainder."""

    @scenario("Divide numbers")
    @example(dividend=7, divisor=2, quotient=3)
    @example(dividend=9, divisor=3, quotient=3)
    def DivideNumbers(self, dividend: int, divisor: int, quotient: int):
        given("I have entered <dividend> into the calculator")
        and_("I have entered <divisor> into the calculator")
        when("I press divide")
        then("the result should be <quotient> on the screen")
        raise NotImplementedError
