# recorder — logique métier : dossiers, classeur, historique, sauvegarde des médias
