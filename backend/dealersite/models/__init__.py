from .dealers import Dealer, DealerSite
from .customizations import Customization, CustomizationRevision
