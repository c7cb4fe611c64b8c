"""
Background knowledge given to the estimator as the system message, when measuring behaviors.
"""
from behaviordispatch.utils.dedent_strip import dedent_strip

GAIN_BRIEF = dedent_strip("""
    # measure 101: gain

    gain is the value that a behavior produces once it is delivered, expressed per week.

    gain has two sources:
    - leverage, the time that the behavior saves people, in minutes per week
    - yieldage, the money that the behavior brings in or protects, in dollars per week

    estimate what is realistic for the behavior as described, not what is hoped for.
    when the description is vague, prefer conservative numbers.
""")

LEVERAGE_BRIEF = dedent_strip("""
    # measure 101: gain.leverage

    leverage is time saved, in minutes per week.

    - direct leverage is the time saved by the behavior itself,
      for the authors that build on it and for the people that support and operate it.
    - transitive leverage is the additional time saved because the behavior unblocks
      other behaviors that depend on it.

    a behavior that removes a weekly 30 minute manual chore has a direct leverage of 30.
""")

YIELDAGE_BRIEF = dedent_strip("""
    # measure 101: gain.yieldage

    yieldage is money gained or protected, in dollars per week.

    yieldage is uncertain, so it is estimated as a set of chances.
    each chance is an outcome with a yieldage and the probability of that outcome.
    the probabilities are between 0 and 1, and together they should not exceed 1.

    the expected yieldage is the sum of yieldage times probability over all chances.
""")

COST_BRIEF = dedent_strip("""
    # measure 101: cost

    cost is what a behavior takes to deliver and to keep running.

    cost has two sources:
    - attend, the time that people must spend on it, in minutes
    - expend, the money that must be spent on it, in dollars

    each source has an upfront part, paid once, and a recurrent part, paid every week.
    upfront costs are amortized over the cost horizon.
""")
