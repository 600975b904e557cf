from rich.pretty import pprint

from summit import *


@command(arguments=("num1", "num2"))
def add(arguments, options):
    """Adds two numbers"""
    return str(float(arguments[0]) + float(arguments[1]))


@command(alias="d", arguments=("num1", "num2"), options=[Option("round", descr="Round the result")])
def div(arguments, options):
    """Divides two numbers"""
    result = float(arguments[0]) / float(arguments[1])
    return str(round(result) if "round" in options else result)


app = App("calc", "A simple calculator", "1.0.0", [add, div], shell=True, colorful=True)


if __name__ == '__main__':
    if (result := app.run()) is not None:
        pprint(result)
