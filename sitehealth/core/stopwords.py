"""English stopwords excluded from keyword frequency counts."""

STOPWORDS = frozenset("""
about above after again against all also among and another any are aren't
around because been before being below between both but can cannot could
couldn't did didn't does doesn't doing don't down during each either else
ever every few for from further get gets got had hadn't has hasn't have
haven't having her here hers herself him himself his how however into isn't
its itself just least less let like made make many may might more most much
must myself near neither never new next nor not now off often once one only
onto other others our ours ourselves out over own per perhaps rather said
same say says see seen shall she should shouldn't since some still such
than that the their theirs them themselves then there these they this those
though through thus till too toward towards under until upon use used using
very via was wasn't way well were weren't what whatever when where whether
which while who whom whose why will with within without won't would
wouldn't yet you your yours yourself yourselves
""".replace("'", "").split())
